import pytest

from samples import PS_LX, FakeSource


@pytest.fixture
def ps_source() -> FakeSource:
    return FakeSource([PS_LX])
