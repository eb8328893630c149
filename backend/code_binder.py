"""Scannable codes for device tags.

The payload of every code is the device id as plain text: device 7 is encoded
as ``"7"``. Scanning a tag therefore yields the id that ``GET /devices/<id>``
expects.
"""

from __future__ import annotations

import asyncio
import io
from dataclasses import dataclass

import qrcode
from qrcode import constants
from PIL import Image

__all__ = ["CodeOptions", "DEFAULT_CODE_OPTIONS", "render_code", "render_code_async"]

_ERROR_CORRECTION = {
    "L": constants.ERROR_CORRECT_L,
    "M": constants.ERROR_CORRECT_M,
    "Q": constants.ERROR_CORRECT_Q,
    "H": constants.ERROR_CORRECT_H,
}


@dataclass(frozen=True)
class CodeOptions:
    error_correction: str = "H"
    width: int = 300
    height: int = 300
    image_format: str = "PNG"
    border: int = 4

    def __post_init__(self) -> None:
        if self.error_correction not in _ERROR_CORRECTION:
            raise ValueError(f"unknown error correction level: {self.error_correction!r}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be positive")
        if self.border < 0:
            raise ValueError("border must not be negative")

    @property
    def media_type(self) -> str:
        return f"image/{self.image_format.lower()}"


DEFAULT_CODE_OPTIONS = CodeOptions()


def _matrix_image(payload: str, options: CodeOptions) -> Image.Image:
    code = qrcode.QRCode(
        version=None,
        error_correction=_ERROR_CORRECTION[options.error_correction],
        box_size=1,
        border=options.border,
    )
    code.add_data(payload)
    code.make(fit=True)
    matrix = code.get_matrix()

    size = len(matrix)
    image = Image.new("L", (size, size), 255)
    image.putdata([0 if dark else 255 for row in matrix for dark in row])
    return image


def render_code(identifier: object, options: CodeOptions = DEFAULT_CODE_OPTIONS) -> bytes:
    """Render ``str(identifier)`` as a code image and return the encoded bytes.

    The module matrix is scaled with nearest-neighbour sampling so the output
    stays sharp, and nothing time-dependent is written into the file: the same
    identifier and options always give the same bytes.
    """
    image = _matrix_image(str(identifier), options)
    image = image.resize((options.width, options.height), Image.Resampling.NEAREST)
    buffer = io.BytesIO()
    image.save(buffer, format=options.image_format)
    return buffer.getvalue()


async def render_code_async(identifier: object, options: CodeOptions = DEFAULT_CODE_OPTIONS) -> bytes:
    return await asyncio.to_thread(render_code, identifier, options)
