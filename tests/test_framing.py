"""Tests for frame parsing and wire encodings."""

import dataclasses

import pytest

from tvctl_mcp.protocol.framing import (
    CODE_POWER,
    CODE_SCREEN,
    END_MARKER,
    START_MARKER,
    Frame,
    WireEncoding,
    format_hex,
    parse_frame,
    to_wire,
)

POWER_ON = bytes.fromhex("DD FF 00 08 C1 15 00 00 01 BB BB DD BB CC")
SCREEN_OFF = bytes.fromhex("DD FF 00 07 C1 31 00 01 00 F7 BB CC")


def test_parse_power_frame_fields():
    """Power frames carry a 3-byte data field and sub-code 0x0000."""
    frame = parse_frame(POWER_ON)
    assert frame is not None
    assert frame.code == CODE_POWER
    assert frame.subcode == 0x0000
    assert frame.data == b"\x01\xBB\xBB"
    assert frame.checksum == 0xDD
    assert frame.declared_length == 8
    assert frame.body_length == 8


def test_parse_screen_frame_fields():
    """Screen frames carry one data byte; the declared length is not enforced."""
    frame = parse_frame(SCREEN_OFF)
    assert frame is not None
    assert frame.code == CODE_SCREEN
    assert frame.subcode == 0x0001
    assert frame.data == b"\x00"
    assert frame.checksum == 0xF7
    assert frame.declared_length == 7
    assert frame.body_length == 6


def test_parse_missing_start_marker():
    bad = b"\xAA\xFF" + SCREEN_OFF[2:]
    assert parse_frame(bad) is None


def test_parse_missing_end_marker():
    bad = SCREEN_OFF[:-2] + b"\x00\x00"
    assert parse_frame(bad) is None


def test_parse_too_short():
    """A frame with no data byte is rejected."""
    assert parse_frame(START_MARKER + b"\x00\x05\xC1\x31\x00\x01\xF7" + END_MARKER) is None
    assert parse_frame(b"") is None


def test_to_wire_binary_is_identity():
    assert to_wire(SCREEN_OFF) == SCREEN_OFF
    assert to_wire(SCREEN_OFF, WireEncoding.BINARY) == SCREEN_OFF


def test_to_wire_ascii_hex():
    """ASCII hex is upper-case digits with no separators."""
    assert to_wire(SCREEN_OFF, WireEncoding.ASCII_HEX) == b"DDFF0007C131000100F7BBCC"


def test_format_hex():
    assert format_hex(SCREEN_OFF) == "DD FF 00 07 C1 31 00 01 00 F7 BB CC"


def test_frame_repr():
    """Frame repr should be readable."""
    f = Frame(code=0xC131, subcode=1, data=b"\x01", checksum=0xF6, declared_length=7)
    r = repr(f)
    assert "0xC131" in r
    assert "0xF6" in r


def test_frame_is_immutable():
    frame = parse_frame(POWER_ON)
    with pytest.raises(dataclasses.FrozenInstanceError):
        frame.checksum = 0
