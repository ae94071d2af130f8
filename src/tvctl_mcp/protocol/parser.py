"""Best-effort decoding of device replies.

Replies are diagnostic only. Their format is not documented, so the raw
bytes are always kept alongside a text rendering and, when the reply looks
like a command frame, its parsed fields.
"""

from __future__ import annotations

from dataclasses import dataclass

from .framing import Frame, format_hex, parse_frame


@dataclass(frozen=True)
class DeviceResponse:
    """Bytes read back from the device after a command."""

    raw: bytes
    text: str
    frame: Frame | None = None

    def __repr__(self) -> str:
        return f"DeviceResponse(raw={format_hex(self.raw)}, text={self.text!r})"

    def to_dict(self) -> dict:
        result = {
            "raw_hex": format_hex(self.raw),
            "raw_bytes": list(self.raw),
            "text": self.text,
        }
        if self.frame is not None:
            result["frame"] = repr(self.frame)
        return result


def parse_response(data: bytes) -> DeviceResponse:
    """Wrap a reply in a ``DeviceResponse``.

    Non-printable bytes in the text rendering are replaced, never raised on.
    """
    text = data.decode("utf-8", errors="replace").strip()
    return DeviceResponse(raw=bytes(data), text=text, frame=parse_frame(data))
