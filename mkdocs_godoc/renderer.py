"""
Markdown renderer for structured documentation.

Turns the Block sequences of :class:`~.lang.Doc` objects into Markdown:
headers at the document's level, paragraphs as they are, code as indented
or fenced blocks and lists as (possibly nested) entries. Fields and their
examples get a header each, with examples folded into collapsible sections.
"""

from __future__ import annotations

from .formatting import (
    code_block,
    collapsible_section,
    escape,
    fenced_code_block,
    header,
    list_entry,
    paragraph,
)
from .lang import BlockKind, ItemKind


class RenderConfig:
    def __init__(self, *, code_style="indented", language="go"):
        self.code_style = code_style
        self.language = language


def _code(text, cfg):
    if cfg.code_style == "fenced":
        return fenced_code_block(cfg.language, text)
    return code_block(text.rstrip("\n"))


# Python-Markdown nests list content by tab_length, which MkDocs leaves at 4
_LIST_INDENT = "    "


def _indent(text, prefix):
    return "\n".join(f"{prefix}{line}" if line else line for line in text.split("\n"))


def _render_block(block, cfg):
    if block.kind is BlockKind.PARAGRAPH:
        return paragraph(block.text)
    if block.kind is BlockKind.CODE:
        return _code(block.text, cfg)
    if block.kind is BlockKind.HEADER:
        return header(block.level, block.text)
    return render_list(block.list, 0, cfg)


def render_list(lst, depth=0, cfg=None):
    if cfg is None:
        cfg = RenderConfig()
    lines = []
    for item in lst.items:
        started = continued = False
        for block in item.blocks:
            if block.kind is BlockKind.LIST:
                # A nested list cannot interrupt a continuation paragraph
                if continued:
                    lines.append("")
                lines.append(render_list(block.list, depth + 1, cfg))
                continue
            text = _render_block(block, cfg)
            if started:
                lines += ["", _indent(text, _LIST_INDENT * (depth + 1))]
                continued = True
                continue
            started = True
            if item.kind is ItemKind.ORDERED:
                lines.append(f"{_LIST_INDENT * depth}{item.number}. {text}" if text else "")
            else:
                lines.append(list_entry(2 * depth, text))
        if lst.blank_between:
            lines.append("")
    return "\n".join(lines).rstrip("\n")


def render_blocks(blocks, cfg=None):
    if cfg is None:
        cfg = RenderConfig()
    parts = [_render_block(b, cfg) for b in blocks]
    return "\n\n".join(p for p in parts if p)


def render_doc(doc, cfg=None, *, title=None):
    """Render a whole Doc, optionally under a header one level above it."""
    parts = []
    if title:
        parts.append(header(max(1, doc.level - 1), escape(title)))
    body = render_blocks(doc.blocks, cfg)
    if body:
        parts.append(body)
    return "\n\n".join(parts)


def render_example(example, cfg=None):
    if cfg is None:
        cfg = RenderConfig()

    def body():
        parts = [render_blocks(example.doc.blocks, cfg)]
        if example.code:
            parts.append(fenced_code_block(cfg.language, example.code))
        if example.output:
            parts += ["Output:", fenced_code_block("", example.output)]
        return "\n\n" + "\n\n".join(p for p in parts if p) + "\n\n"

    return collapsible_section(escape(example.title), body)


def render_field(field, cfg=None):
    if cfg is None:
        cfg = RenderConfig()
    parts = [header(field.level, escape(field.title))]
    body = render_blocks(field.doc.blocks, cfg)
    if body:
        parts.append(body)
    for example in field.examples:
        parts.append(render_example(example, cfg))
    return "\n\n".join(parts)
