"""Tests for reply decoding."""

from tvctl_mcp.protocol.framing import CODE_POWER
from tvctl_mcp.protocol.parser import DeviceResponse, parse_response


def test_parse_text_reply():
    response = parse_response(b"OK\r\n")
    assert response.raw == b"OK\r\n"
    assert response.text == "OK"
    assert response.frame is None


def test_parse_binary_reply_does_not_raise():
    """Undecodable bytes are replaced in the text rendering."""
    response = parse_response(b"\xFF\xFE\x00")
    assert response.raw == b"\xFF\xFE\x00"
    assert "�" in response.text


def test_parse_framed_reply():
    data = bytes.fromhex("DD FF 00 06 C1 15 00 00 00 DD BB CC")
    response = parse_response(data)
    assert response.frame is not None
    assert response.frame.code == CODE_POWER


def test_to_dict():
    d = parse_response(b"\x01\x02").to_dict()
    assert d["raw_hex"] == "01 02"
    assert d["raw_bytes"] == [1, 2]
    assert "frame" not in d


def test_repr():
    r = repr(DeviceResponse(raw=b"\xAB", text="x"))
    assert "AB" in r
