"""Pytest configuration for tests."""

import sys
from pathlib import Path

import pytest

# Add the project root to the path so we can import ir_dump_decoder
root_dir = Path(__file__).parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

from ir_dump_decoder.models import RawSignal, SignalKind

HEADER = "Filetype: IR signals file\nVersion: 1\n"

# Dump start, one packet with bits 0 then 1, last packet end
ONE_PACKET_DATA = [550, 17700, 2972, 8930, 550, 550, 550, 1650, 550]

# Two packets separated by an inter-packet gap
TWO_PACKET_DATA = [
    550, 17700,
    2972, 8930, 550, 550, 550, 1650, 550, 2920,
    2972, 8930, 550, 1650, 550, 550, 550,
]


def record_text(name, data, frequency=38000, duty_cycle="0.330000", comment=""):
    """Text of one raw record, as written by the remote's dump tool."""
    values = " ".join(str(value) for value in data)
    return (
        f"#{comment}\n"
        f"name: {name}\n"
        "type: raw\n"
        f"frequency: {frequency}\n"
        f"duty_cycle: {duty_cycle}\n"
        f"data: {values}\n"
    )


@pytest.fixture
def make_record():
    """Factory for record text."""
    return record_text


@pytest.fixture
def one_packet_signal():
    return RawSignal(
        name="power",
        kind=SignalKind.RAW,
        frequency=38000,
        duty_cycle=0.33,
        data=ONE_PACKET_DATA,
    )


@pytest.fixture
def two_packet_signal():
    return RawSignal(
        name="temp_up",
        kind=SignalKind.RAW,
        frequency=38000,
        duty_cycle=0.33,
        data=TWO_PACKET_DATA,
    )


@pytest.fixture
def broken_signal():
    """Dump start followed by a pause where a packet leader is expected."""
    return RawSignal(
        name="broken",
        kind=SignalKind.RAW,
        frequency=38000,
        duty_cycle=0.33,
        data=[550, 17700, 550, 550],
    )


@pytest.fixture
def sample_dump_text():
    """A dump with two decodable signals."""
    return (
        HEADER
        + record_text("power", ONE_PACKET_DATA, comment=" ")
        + record_text("temp_up", TWO_PACKET_DATA, comment=" ")
    )


@pytest.fixture
def sample_dump_file(tmp_path, sample_dump_text):
    path = tmp_path / "remote.ir"
    path.write_text(sample_dump_text, encoding="utf-8")
    return path
