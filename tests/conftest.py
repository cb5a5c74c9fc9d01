import pytest
from datetime import datetime, timezone


@pytest.fixture
def reference_now() -> datetime:
    """Fixed 'current time' used to resolve report day-of-month fields."""
    return datetime(2024, 5, 5, 23, 0, tzinfo=timezone.utc)


@pytest.fixture
def utc():
    """Build a UTC datetime."""
    def build(*args) -> datetime:
        return datetime(*args, tzinfo=timezone.utc)
    return build


@pytest.fixture
def sample_taf() -> str:
    """Multi-line TAF with FM, TEMPO, BECMG and PROB groups."""
    return (
        "TAF KJFK 051730Z 0518/0624 33015KT P6SM SCT250\n"
        "  FM052000 34010KT P6SM BKN040\n"
        "  TEMPO 0522/0602 3SM -SHRA BKN020\n"
        "  BECMG 0606/0608 VRB03KT 5SM BR OVC008\n"
        "  PROB30 0612/0616 1SM TSRA OVC004CB="
    )
