from collections.abc import Mapping
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


BlockType = Literal["h1", "h2", "h3", "h4", "text", "image"]


class BlockPosition(BaseModel):
    x: float
    y: float
    width: float
    height: float


class BlockStyle(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    fontSize: float | None = None
    fontWeight: Literal["normal", "medium", "semibold", "bold"] | None = None
    textAlign: Literal["left", "center", "right"] | None = None
    color: str | None = None
    backgroundColor: str | None = None
    borderRadius: float | None = None


class ContentBlock(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: BlockType
    content: str
    position: BlockPosition
    style: dict[str, Any] | None = None
    zIndex: int | None = None

    @field_validator("style", mode="before")
    @classmethod
    def _validate_style(cls, value: Any) -> dict[str, Any] | None:
        if value is None:
            return None
        if not isinstance(value, Mapping):
            raise ValueError("style must be an object")
        validated = BlockStyle.model_validate(dict(value))
        # Keep the caller's key order; the typed model only vets keys and values.
        return {key: getattr(validated, key) for key in value}


class Kite(BaseModel):
    model_config = ConfigDict(extra="ignore")

    contentBlocks: list[ContentBlock] = Field(validation_alias=AliasChoices("contentBlocks", "blocks"))
    speakerNotes: str | None = None


class SyncTalkDataOut(BaseModel):
    success: bool = True
    kites: int
    changed: bool


class SyncTalkDataPreviewOut(BaseModel):
    kites: int
    changed: bool
    region: str
