"""Radiance RGBE (.hdr) image encoding."""

from __future__ import annotations

import math
from dataclasses import dataclass
from os import PathLike
from typing import Sequence

from .vector import Color

_HEADER_LINES = (
    b"#?RADIANCE",
    b"# Made with 100% pure HDR Shop",
    b"FORMAT=32-bit_rle_rgbe",
    b"EXPOSURE=1.0000000000000",
    b"",
)

_MAX_RUN = 127


@dataclass(frozen=True)
class RGBEPixel:
    """A pixel as shared-exponent mantissas plus a biased exponent."""

    r: int = 0
    g: int = 0
    b: int = 0
    e: int = 0

    def __bytes__(self) -> bytes:
        return bytes((self.r, self.g, self.b, self.e))


def _to_byte(value: float) -> int:
    return min(255, max(0, int(value)))


def rgbe_pixel(color: Color) -> RGBEPixel:
    """Convert a floating-point colour to its RGBE representation."""
    d = color.max_component()
    if d <= 1e-32:
        return RGBEPixel()
    mantissa, exponent = math.frexp(d)
    scale = mantissa * 256.0 / d
    return RGBEPixel(
        _to_byte(color.x * scale),
        _to_byte(color.y * scale),
        _to_byte(color.z * scale),
        (exponent + 128) & 0xFF,
    )


def encode_hdr(image: Sequence[Color], width: int, height: int) -> bytes:
    """Encode a row-major ``width`` x ``height`` image as .hdr file contents.

    Rows are written from the last one to the first, each as four
    channel planes split into runs of at most 127 literal bytes.
    """
    if width < 0 or height < 0:
        raise ValueError("image dimensions must be non-negative")
    if len(image) != width * height:
        raise ValueError(
            f"image holds {len(image)} pixels, expected {width * height}"
        )

    out = bytearray(b"\n".join(_HEADER_LINES) + b"\n")
    out += f"-Y {height} +X {width}\n".encode("ascii")

    for row in reversed(range(height)):
        pixels = [bytes(rgbe_pixel(c)) for c in image[row * width:(row + 1) * width]]
        out += bytes((0x02, 0x02, (width >> 8) & 0xFF, width & 0xFF))
        for channel in range(4):
            plane = bytes(p[channel] for p in pixels)
            for start in range(0, width, _MAX_RUN):
                chunk = plane[start:start + _MAX_RUN]
                out.append(len(chunk))
                out += chunk
    return bytes(out)


def save_hdr(path: str | PathLike[str], image: Sequence[Color], width: int, height: int) -> None:
    """Write ``image`` to ``path`` in Radiance .hdr format."""
    data = encode_hdr(image, width, height)
    with open(path, "wb") as fh:
        fh.write(data)