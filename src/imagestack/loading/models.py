"""
Module: loading.models

Purpose:
    Input and loaded-image records for the conversion pipeline.

Key Classes:
    - ImageInput: Raw blob handed in by the caller
    - SourceImage: Decoded and measured image (immutable)
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class ImageInput:
    """
    Raw image blob with its declared MIME type.

    Attributes:
        identifier: Name used in logs and error messages (usually file name)
        data: Raw encoded bytes
        mime_type: Declared MIME type, e.g. "image/png"
    """

    identifier: str
    data: bytes = field(repr=False)
    mime_type: str

    @property
    def is_image(self) -> bool:
        """Whether the declared MIME type is an image type."""
        return (self.mime_type or "").lower().startswith("image/")

    @classmethod
    def from_path(cls, path: Path, mime_type: Optional[str] = None) -> "ImageInput":
        """
        Read a file into an ImageInput.

        The MIME type is guessed from the file extension when not given;
        unknown extensions get "application/octet-stream".
        """
        path = Path(path)
        if mime_type is None:
            mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            identifier=path.name,
            data=path.read_bytes(),
            mime_type=mime_type or "application/octet-stream",
        )


@dataclass(frozen=True)
class SourceImage:
    """
    Image measured by the loader (immutable).

    Holds only the encoded bytes and metadata; the decoded pixel buffer is
    released as soon as the image has been measured.

    Attributes:
        identifier: Name from the originating ImageInput
        data: Raw encoded bytes
        mime_type: Declared MIME type
        format: Pillow format name detected from the bytes (e.g. "PNG")
        width: Intrinsic width in pixels
        height: Intrinsic height in pixels
        mode: Pillow image mode (e.g. "RGB", "RGBA", "P")
    """

    identifier: str
    data: bytes = field(repr=False)
    mime_type: str
    format: str
    width: int
    height: int
    mode: str = "RGB"

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) in pixels."""
        return (self.width, self.height)

    @property
    def has_alpha(self) -> bool:
        """Whether the image mode can carry transparency."""
        return self.mode in ("RGBA", "LA", "PA", "P")
