"""
Structured documentation content.

A :class:`Doc` is the ordered list of :class:`Block` elements (paragraphs,
headers, code blocks and lists) making up one documentation comment. Block
text is already rendered inline Markdown (cross-references resolved, wrapped
lines joined) but not yet wrapped in block-level constructs, which is left
to the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from . import comment
from .links import DEFAULT_PACKAGE_HOST, LinkResolver, SymbolTable
from .text import collapse_whitespace, normalize_doc

MAX_LEVEL = 6


@dataclass(frozen=True)
class Config:
    level: int = 1
    current_package: str = ""
    symbols: frozenset = field(default_factory=frozenset)
    host: str = DEFAULT_PACKAGE_HOST

    def __post_init__(self):
        object.__setattr__(self, "symbols", frozenset(self.symbols))

    def inc(self, step):
        """Copy of the config with headers ``step`` levels deeper."""
        return replace(self, level=self.level + step)

    def symbol_table(self):
        return SymbolTable(self.current_package, self.symbols)

    def resolver(self):
        return LinkResolver.for_symbols(self.symbol_table(), self.host)


class BlockKind(Enum):
    PARAGRAPH = "paragraph"
    CODE = "code"
    HEADER = "header"
    LIST = "list"


class ItemKind(Enum):
    ORDERED = "ordered"
    UNORDERED = "unordered"


class Block:
    """One block element of a documentation comment."""

    __slots__ = ("_cfg", "_kind", "_text", "_list", "_inline")

    def __init__(self, cfg, kind, text="", list=None, inline=False):
        self._cfg = cfg
        self._kind = kind
        self._text = text if kind is not BlockKind.LIST else ""
        self._list = list if kind is BlockKind.LIST else None
        self._inline = inline

    @classmethod
    def list_block(cls, cfg, list, inline=False):
        return cls(cfg, BlockKind.LIST, "", list, inline)

    @property
    def level(self):
        """Header level for HEADER blocks, never deeper than 6."""
        return min(self._cfg.level, MAX_LEVEL)

    @property
    def kind(self):
        return self._kind

    @property
    def text(self):
        return self._text

    @property
    def list(self):
        return self._list

    @property
    def inline(self):
        return self._inline

    def __repr__(self):
        body = self._list if self._kind is BlockKind.LIST else self._text
        return f"Block({self._kind.value}, {body!r}, inline={self._inline})"


@dataclass(frozen=True)
class Item:
    blocks: tuple
    kind: ItemKind = ItemKind.UNORDERED
    number: int = 0


@dataclass(frozen=True)
class List:
    items: tuple
    blank_between: bool = False


def new_list(cfg, node, resolver):
    items = []
    for it in node.items:
        blocks = parse_blocks(cfg, it.content, True, resolver)
        if it.number:
            items.append(Item(tuple(blocks), ItemKind.ORDERED, int(it.number)))
        else:
            items.append(Item(tuple(blocks)))
    return List(tuple(items), node.blank_between)


def parse_blocks(cfg, nodes, inline=False, resolver=None):
    """Turn comment block nodes into :class:`Block` elements, in order.

    ``inline`` marks blocks that live inside a list item; it is passed down
    to every nested list.
    """
    if resolver is None:
        resolver = cfg.resolver()
    res = []
    for node in nodes:
        if isinstance(node, comment.Code):
            res.append(Block(cfg.inc(0), BlockKind.CODE, node.text, inline=inline))
        elif isinstance(node, comment.Heading):
            text = print_text(node.text, resolver)
            res.append(Block(cfg.inc(0), BlockKind.HEADER, text, inline=inline))
        elif isinstance(node, comment.List):
            lst = new_list(cfg.inc(0), node, resolver)
            res.append(Block.list_block(cfg.inc(0), lst, inline))
        elif isinstance(node, comment.Paragraph):
            # Line wrapping in the source carries no meaning
            text = collapse_whitespace(print_text(node.text, resolver))
            res.append(Block(cfg.inc(0), BlockKind.PARAGRAPH, text, inline=inline))
    return res


def print_text(nodes, resolver):
    out = []
    for t in nodes:
        if isinstance(t, (comment.Plain, comment.Italic)):
            out.append(t.text)
        elif isinstance(t, comment.DocLink):
            out.append(resolver.render(t))
        elif isinstance(t, comment.Link):
            out.append(f"[{t.text}]({t.url})")
    return "".join(out)


class Doc:
    """Structured contents of one documentation comment.

    Headers inside the comment render at ``cfg.level``. Cross-references are
    looked up against ``cfg.current_package`` and ``cfg.symbols``.
    """

    def __init__(self, cfg, text="", *, tree=None):
        self.cfg = cfg
        self.current_package = cfg.current_package
        symbols = cfg.symbol_table()
        resolver = LinkResolver.for_symbols(symbols, cfg.host)
        if tree is None:
            parser = comment.Parser(symbols.lookup_package, symbols.lookup_symbol)
            tree = parser.parse(normalize_doc(text))
        self.blocks = tuple(parse_blocks(cfg, tree.content, False, resolver))

    @classmethod
    def from_comment(cls, cfg, tree):
        return cls(cfg, tree=tree)

    @property
    def level(self):
        return self.cfg.level
