"""Input capture — image/text slots, active mode, and the readiness gate."""

from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
from pathlib import Path

from .config import get_config
from .errors import InvalidInputError
from .models.content import ImageContent, PendingContent, TextContent
from .types import InputMode

logger = logging.getLogger(__name__)

MIN_TEXT_CHARS = 10
DEFAULT_MODE: InputMode = "image"


def text_is_submittable(text: str) -> bool:
    """True when trimmed *text* is strictly longer than MIN_TEXT_CHARS."""
    return len(text.strip()) > MIN_TEXT_CHARS


def _check_image(data: bytes, mime_type: str) -> None:
    if not mime_type.lower().startswith("image/"):
        raise InvalidInputError(f"Content type {mime_type!r} is not an image")
    if not data:
        raise InvalidInputError("Image is empty")
    limit = get_config().max_image_bytes
    if len(data) > limit:
        raise InvalidInputError(f"Image too large: {len(data)} bytes (limit {limit})")


def read_image_file(path: str | Path) -> ImageContent:
    """Read a whole image file into an ``ImageContent``.

    The MIME type comes from the file extension. Nothing is kept if any
    check fails.

    Raises:
        FileNotFoundError: If *path* is not an existing file.
        InvalidInputError: If the file is not an image, is empty, or is too large.
    """
    p = Path(path).expanduser().resolve()
    if not p.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    mime_type, _ = mimetypes.guess_type(p.name)
    if mime_type is None or not mime_type.startswith("image/"):
        raise InvalidInputError(f"{p.name} ({mime_type or 'unknown type'}) is not an image")
    limit = get_config().max_image_bytes
    size = p.stat().st_size
    # Size check before reading so oversized files are never loaded
    if size > limit:
        raise InvalidInputError(f"Image too large: {size} bytes (limit {limit})")
    data = p.read_bytes()
    _check_image(data, mime_type)
    return ImageContent(data=data, mime_type=mime_type)


def decode_data_url(url: str) -> ImageContent:
    """Decode a ``data:<mime>;base64,<payload>`` URL into an ``ImageContent``.

    Raises:
        InvalidInputError: On a malformed URL, a non-image type or bad base64.
    """
    header, sep, payload = url.strip().partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise InvalidInputError("Expected a data URL of the form data:<mime>;base64,<payload>")
    mime_type = header[len("data:"):-len(";base64")]
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidInputError("Data URL payload is not valid base64") from exc
    _check_image(data, mime_type)
    return ImageContent(data=data, mime_type=mime_type)


class InputCapture:
    """Holds both input slots; only the slot matching ``mode`` is submitted.

    Switching mode never deletes the other slot, so flipping back and forth
    keeps what the user already provided.
    """

    def __init__(self) -> None:
        self.mode: InputMode = DEFAULT_MODE
        self._image: ImageContent | None = None
        self._text: str = ""

    @property
    def image(self) -> ImageContent | None:
        return self._image

    @property
    def text(self) -> str:
        return self._text

    def set_image(self, data: bytes, mime_type: str) -> ImageContent:
        """Replace the image slot. Raises InvalidInputError on a bad image."""
        _check_image(data, mime_type)
        self._image = ImageContent(data=data, mime_type=mime_type)
        return self._image

    def set_text(self, text: str) -> None:
        self._text = text

    def switch_mode(self, mode: InputMode) -> None:
        if mode not in ("image", "text"):
            raise InvalidInputError(f"Invalid mode {mode!r}; use 'image' or 'text'")
        self.mode = mode

    @property
    def pending(self) -> PendingContent | None:
        """The active slot as a PendingContent variant, or None when it is empty."""
        if self.mode == "image":
            return self._image
        if self._text:
            return TextContent(text=self._text)
        return None

    def has_submittable_input(self) -> bool:
        if self.mode == "image":
            return self._image is not None
        return text_is_submittable(self._text)

    def has_anything(self) -> bool:
        """True when either slot holds data, regardless of mode."""
        return self._image is not None or bool(self._text)

    def clear(self) -> None:
        """Drop both slots; the active mode is kept."""
        self._image = None
        self._text = ""
