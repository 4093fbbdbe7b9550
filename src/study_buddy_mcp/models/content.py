"""Pending-content models — the not-yet-submitted user input."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ImageContent(BaseModel):
    """Raw image bytes with their declared MIME type."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["image"] = "image"
    data: bytes
    mime_type: str

    def preview(self) -> dict:
        return {"kind": self.kind, "mime_type": self.mime_type, "size_bytes": len(self.data)}


class TextContent(BaseModel):
    """Typed or pasted study notes."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str

    def preview(self) -> dict:
        return {"kind": self.kind, "text": self.text}


PendingContent = Annotated[Union[ImageContent, TextContent], Field(discriminator="kind")]
