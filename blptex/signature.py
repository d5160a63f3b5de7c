# signature.py
import logging

from .errors import MalformedContainer, TruncatedData
from .texture_types import BLP_TAG, FormatVersion

logger = logging.getLogger(__name__)

TAG_VALUE = int.from_bytes(BLP_TAG, "little")


def sniff_signature(source):
    """Read the 4-byte magic and return (FormatVersion, origin)."""
    origin = source.tell()
    try:
        magic = source.read_uint32()
    except TruncatedData as e:
        raise MalformedContainer("Missing BLP signature") from e
    if magic & 0xFFFFFF != TAG_VALUE:
        raise MalformedContainer(f"Bad signature 0x{magic:08X} at offset {origin}")
    version_byte = magic >> 24
    try:
        version = FormatVersion(chr(version_byte))
    except ValueError:
        raise MalformedContainer(f"Unknown BLP version byte 0x{version_byte:02X}") from None
    logger.debug("Found BLP%s signature at offset %d", version.value, origin)
    return version, origin
