from __future__ import annotations

from collections.abc import Iterable

from kitesync.schemas import BlockPosition, ContentBlock, Kite
from kitesync.services.ts_literals import encode_string, encode_style, format_number, has_style_entries, quote_string

_KITE_INDENT = "  "
_FIELD_INDENT = "    "
_BLOCK_INDENT = "      "
_BLOCK_FIELD_INDENT = "        "


def _encode_position(position: BlockPosition) -> str:
    return (
        f"{{ x: {format_number(position.x)}, y: {format_number(position.y)}, "
        f"width: {format_number(position.width)}, height: {format_number(position.height)} }}"
    )


def encode_block(block: ContentBlock) -> str:
    fields = [
        f"type: {quote_string(block.type)}",
        f"content: {encode_string(block.content)}",
        f"position: {_encode_position(block.position)}",
    ]
    if has_style_entries(block.style):
        fields.append(f"style: {encode_style(block.style)}")
    if block.zIndex is not None:
        fields.append(f"zIndex: {format_number(block.zIndex)}")

    body = "".join(f"{_BLOCK_FIELD_INDENT}{field},\n" for field in fields)
    return f"{_BLOCK_INDENT}{{\n{body}{_BLOCK_INDENT}}}"


def _encode_blocks(blocks: list[ContentBlock]) -> str:
    if not blocks:
        return "[]"
    entries = ",\n".join(encode_block(block) for block in blocks)
    return f"[\n{entries},\n{_FIELD_INDENT}]"


def encode_kite(kite: Kite) -> str:
    fields = [f"blocks: {_encode_blocks(kite.contentBlocks)}"]
    if kite.speakerNotes and kite.speakerNotes.strip():
        fields.append(f"speakerNotes: {encode_string(kite.speakerNotes)}")

    body = "".join(f"{_FIELD_INDENT}{field},\n" for field in fields)
    return f"{_KITE_INDENT}{{\n{body}{_KITE_INDENT}}}"


def render_kites(kites: Iterable[Kite]) -> str:
    entries = [encode_kite(kite) for kite in kites]
    if not entries:
        return ""
    return ",\n".join(entries) + ","
