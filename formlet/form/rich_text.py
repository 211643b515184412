"""Documents produced by the rich-text editor widget.

The editor emits its contents as a list of delta operations: every op inserts
a run of text with optional inline attributes (bold, italic, link...), and the
attributes of the op holding a newline apply to the whole line (header,
list). Forms store the document as-is and parse its Markdown rendering.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

INLINE_MARKERS = (
    ("code", "`"),
    ("strike", "~~"),
    ("italic", "*"),
    ("bold", "**"),
)


@dataclass(frozen=True)
class RichTextDocument:
    ops: Tuple[Dict[str, Any], ...] = field(default_factory=lambda: ({"insert": "\n"},))

    @classmethod
    def from_text(cls, text: str) -> "RichTextDocument":
        if not text.endswith("\n"):
            text += "\n"
        return cls(ops=({"insert": text},))

    @classmethod
    def from_ops(cls, ops: List[Dict[str, Any]]) -> "RichTextDocument":
        return cls(ops=tuple(ops))

    def to_plain_text(self) -> str:
        return "".join(op["insert"] for op in self.ops if isinstance(op.get("insert"), str))

    def is_empty(self) -> bool:
        return not self.to_plain_text().strip()

    def to_markdown(self) -> str:
        lines = []
        ordered_index = 0
        for segments, line_attrs in self._lines():
            text = "".join(_render_inline(content, attrs) for content, attrs in segments)
            header = line_attrs.get("header")
            list_kind = line_attrs.get("list")
            if list_kind == "ordered":
                ordered_index += 1
                lines.append(f"{ordered_index}. {text}")
                continue
            ordered_index = 0
            if list_kind == "bullet":
                lines.append(f"- {text}")
            elif header:
                lines.append(f"{'#' * int(header)} {text}")
            else:
                lines.append(text)
        return "\n".join(lines).strip("\n")

    def _lines(self):
        segments: List[Tuple[str, Dict[str, Any]]] = []
        for op in self.ops:
            insert = op.get("insert")
            if not isinstance(insert, str):
                # Embeds (images, formulas) have no text representation
                continue
            attrs = op.get("attributes") or {}
            parts = insert.split("\n")
            for index, part in enumerate(parts):
                if part:
                    segments.append((part, attrs))
                if index < len(parts) - 1:
                    yield segments, attrs
                    segments = []
        if segments:
            yield segments, {}


def _render_inline(content: str, attrs: Dict[str, Any]) -> str:
    for name, marker in INLINE_MARKERS:
        if attrs.get(name):
            content = f"{marker}{content}{marker}"
    link: Optional[str] = attrs.get("link")
    if link:
        content = f"[{content}]({link})"
    return content
