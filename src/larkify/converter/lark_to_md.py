"""Feishu block list to Markdown-like text.

Converts the flat, document-ordered block list returned by the docx
``blocks`` endpoint into one line (or one fenced block) per block.  The
rendering is deliberately lossy: the remote model is richer than the text
form, so tables, images, callouts and other containers collapse to fixed
placeholders, and ordered items are always numbered ``1.``.

Usage::

    from larkify.converter.lark_to_md import LarkToMarkdownRenderer

    renderer = LarkToMarkdownRenderer()
    md = renderer.render_blocks(items)
"""

from __future__ import annotations

from collections.abc import Callable as _Callable

from larkify.models import BlockType, ConversionWarning

from .inline import elements_to_text
from .languages import language_name

# Block types rendered as a fixed placeholder token.
_PLACEHOLDERS: dict[BlockType, str] = {
    BlockType.IMAGE: "[image]",
    BlockType.TABLE: "[table]",
    BlockType.BITABLE: "[bitable]",
    BlockType.GRID: "[grid]",
    BlockType.CALLOUT: "[callout]",
}


class LarkToMarkdownRenderer:
    """Render Feishu docx blocks as Markdown-like text.

    The renderer collects a :class:`ConversionWarning` in :attr:`warnings`
    for every block whose type it does not know.  Such blocks never raise;
    they fall back to the text of the first body that carries
    ``elements``, or to an empty line.
    """

    def __init__(self) -> None:
        self.warnings: list[ConversionWarning] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render_blocks(self, blocks: list[dict]) -> str:
        """Render *blocks* one per line, in order.

        Parameters
        ----------
        blocks:
            Block objects as returned by the docx API, page block included.

        Returns
        -------
        str
            Lines joined with ``"\\n"``; no trailing newline.
        """
        self.warnings = []
        return "\n".join(self.render_block(block) for block in blocks)

    def render_block(self, block: dict) -> str:
        """Render a single block."""
        block_type = BlockType.from_value(block.get("block_type", 0))
        if block_type is not None:
            level = block_type.heading_level
            if level is not None:
                return self._render_heading(block, block_type, level)
            if block_type in _PLACEHOLDERS:
                return _PLACEHOLDERS[block_type]
            renderer = _BLOCK_RENDERERS.get(block_type)
            if renderer is not None:
                return renderer(self, block)
        return self._render_unknown(block)

    # ------------------------------------------------------------------
    # Block type renderers
    # ------------------------------------------------------------------

    def _render_page(self, block: dict) -> str:
        return "# " + _text_of(block, "page")

    def _render_text(self, block: dict) -> str:
        return _text_of(block, "text")

    def _render_heading(self, block: dict, block_type: BlockType, level: int) -> str:
        return "#" * level + " " + _text_of(block, block_type.payload_key)

    def _render_bullet(self, block: dict) -> str:
        return "- " + _text_of(block, "bullet")

    def _render_ordered(self, block: dict) -> str:
        return "1. " + _text_of(block, "ordered")

    def _render_code(self, block: dict) -> str:
        code = block.get("code") or {}
        lang = language_name((code.get("style") or {}).get("language"))
        return f"```{lang}\n{elements_to_text(code.get('elements'))}\n```"

    def _render_quote(self, block: dict) -> str:
        body = block.get("quote_container") or block.get("quote") or {}
        return "> " + elements_to_text(body.get("elements"))

    def _render_todo(self, block: dict) -> str:
        todo = block.get("todo") or {}
        done = (todo.get("style") or {}).get("done", False)
        return f"- [{'x' if done else ' '}] " + elements_to_text(todo.get("elements"))

    def _render_divider(self, block: dict) -> str:
        return "---"

    def _render_unknown(self, block: dict) -> str:
        self.warnings.append(ConversionWarning(
            code="UNKNOWN_BLOCK_TYPE",
            message=f"Block type {block.get('block_type')!r} rendered best-effort.",
            context={
                "block_id": block.get("block_id", ""),
                "block_type": block.get("block_type"),
            },
        ))
        for value in block.values():
            if isinstance(value, dict) and "elements" in value:
                return elements_to_text(value["elements"])
        return ""


def _text_of(block: dict, key: str) -> str:
    return elements_to_text((block.get(key) or {}).get("elements"))


_BLOCK_RENDERERS: dict[BlockType, _Callable[[LarkToMarkdownRenderer, dict], str]] = {
    BlockType.PAGE: LarkToMarkdownRenderer._render_page,
    BlockType.TEXT: LarkToMarkdownRenderer._render_text,
    BlockType.BULLET: LarkToMarkdownRenderer._render_bullet,
    BlockType.ORDERED: LarkToMarkdownRenderer._render_ordered,
    BlockType.CODE: LarkToMarkdownRenderer._render_code,
    BlockType.QUOTE: LarkToMarkdownRenderer._render_quote,
    BlockType.QUOTE_CONTAINER: LarkToMarkdownRenderer._render_quote,
    BlockType.TODO: LarkToMarkdownRenderer._render_todo,
    BlockType.DIVIDER: LarkToMarkdownRenderer._render_divider,
}
