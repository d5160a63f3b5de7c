# errors.py


class BLPError(ValueError):
    """Base class for every failure raised while decoding a BLP texture."""


class MalformedContainer(BLPError):
    """The signature or a structural header field is invalid."""


class UnsupportedVersion(BLPError):
    """The modern header carries an inner version other than 1."""


class UnsupportedMipLevel(BLPError):
    """The requested mip level is not stored or cannot be decoded."""


class TruncatedData(BLPError):
    """The byte source ran out before a read completed."""


class DecodeFailure(BLPError):
    """The JPEG collaborator rejected the level data."""
