import os

import pytest

# charts are written to files only; never open a window
os.environ.setdefault("MPLBACKEND", "Agg")


@pytest.fixture
def abracadabra():
    return b"abracadabra"


@pytest.fixture
def skewed_full_alphabet():
    # every byte value at least once, low values far more often
    data = bytearray(range(256))
    for value in range(256):
        data.extend(bytes((value,)) * ((256 - value) // 8))
    return bytes(data)
