import pytest

from builders import bgra_palette


@pytest.fixture
def ramp_palette():
    return bgra_palette(lambda i: (255 - i, i // 2, i, i))
