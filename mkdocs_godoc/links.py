"""
Cross-reference resolution.

Decides where a documentation cross-reference (a :class:`~.comment.DocLink`)
points to and renders it: an anchor on the current page for symbols of the
documented package, a URL on the package documentation host for anything
imported, or plain text when nothing matches.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .formatting import plain_text

log = logging.getLogger("mkdocs.plugins.godoc")

DEFAULT_PACKAGE_HOST = "https://pkg.go.dev"

_SLUG_WHITESPACE_RE = re.compile(r"\s+")
# Anything but letters, digits, underscores and dashes
_SLUG_REMOVE_RE = re.compile(r"[^\w-]+")


def anchor_slug(heading):
    """Anchor fragment the Markdown host generates for a heading.

    ``heading`` is rendered Markdown; only its visible text counts. Two
    headings with the same text get the same slug, no suffix is added.
    """
    slug = plain_text(heading).lower().strip()
    slug = _SLUG_WHITESPACE_RE.sub("-", slug)
    return _SLUG_REMOVE_RE.sub("", slug)


def type_anchor(name):
    return anchor_slug(f"Type {name}")


class SymbolTable:
    """Names known to exist in the package being documented.

    Types, functions and other top-level names go in ``symbols``. A method
    can be listed as ``Type.Method``; otherwise any method of a listed type
    is accepted. The table is never modified after construction.
    """

    def __init__(self, current_package="", symbols=()):
        self.current_package = current_package
        self.symbols = frozenset(symbols)

    def exists(self, recv, name):
        if not name:
            return False
        if recv:
            return f"{recv}.{name}" in self.symbols or recv in self.symbols
        return name in self.symbols

    def is_current_package(self, import_path):
        return bool(self.current_package) and import_path == self.current_package

    def lookup_package(self, name):
        if self.current_package and name == self.current_package:
            return self.current_package
        return None

    def lookup_symbol(self, recv, name):
        return self.exists(recv, name)


# ── classification results ──


@dataclass(frozen=True)
class Local:
    anchor: str


@dataclass(frozen=True)
class SamePackage:
    anchor: str


@dataclass(frozen=True)
class External:
    host: str
    import_path: str
    name: Optional[str] = None

    @property
    def url(self):
        base = f"{self.host}/{self.import_path}"
        if self.name:
            return f"{base}#{self.name}"
        return base


@dataclass(frozen=True)
class Broken:
    text: str


Resolution = Union[Local, SamePackage, External, Broken]


class LinkResolver:
    """Classify and render cross-references.

    ``exists(recv, name)`` and ``is_current_package(import_path)`` are the
    only inputs besides the reference itself.
    """

    def __init__(
        self,
        exists: Callable[[str, str], bool],
        is_current_package: Callable[[str], bool],
        host: str = DEFAULT_PACKAGE_HOST,
    ):
        self.exists = exists
        self.is_current_package = is_current_package
        self.host = host.rstrip("/")

    @classmethod
    def for_symbols(cls, symbols: SymbolTable, host: str = DEFAULT_PACKAGE_HOST):
        return cls(symbols.exists, symbols.is_current_package, host)

    def classify(self, ref) -> Resolution:
        name = ref.name or ""
        if not ref.import_path:
            if self.exists(ref.recv or "", name):
                return Local(type_anchor(name))
            return Broken(ref.text)
        if self.is_current_package(ref.import_path):
            return SamePackage(type_anchor(name))
        if name:
            symbol = f"{ref.recv}.{name}" if ref.recv else name
            return External(self.host, ref.import_path, symbol)
        return External(self.host, ref.import_path)

    def render(self, ref):
        res = self.classify(ref)
        if isinstance(res, (Local, SamePackage)):
            return f"[{ref.text}](#{res.anchor})"
        if isinstance(res, External):
            return f"[{ref.text}]({res.url})"
        log.debug("godoc: unresolved reference [%s]", ref.text)
        return res.text
