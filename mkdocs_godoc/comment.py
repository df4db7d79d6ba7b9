"""
Doc comment trees and the parser that builds them.

A comment is a sequence of block nodes (paragraphs, headings, code blocks and
lists) whose text is a sequence of inline nodes (plain text, italics, links
and cross-references to other symbols). The parser follows Go doc comment
syntax:

  - ``# Title`` on a line of its own is a heading;
  - indented lines form a code block, or a list when the first of them starts
    with ``-``, ``*``, ``+``, ``•``, ``1.`` or ``1)``;
  - ``[Text]: URL`` lines at the end of the comment define links;
  - ``[Name]``, ``[Type.Method]``, ``[pkg.Name]`` and ``[import/path]`` refer
    to other symbols when the symbol lookups accept them.
"""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass
from typing import Callable, Optional

from .formatting import find_urls


# ── inline nodes ──


@dataclass(frozen=True)
class Plain:
    text: str


@dataclass(frozen=True)
class Italic:
    text: str


@dataclass(frozen=True)
class Link:
    text: str
    url: str
    auto: bool = False


@dataclass(frozen=True)
class DocLink:
    text: str
    import_path: str = ""
    recv: str = ""
    name: str = ""


# ── block nodes ──


@dataclass(frozen=True)
class Paragraph:
    text: tuple = ()


@dataclass(frozen=True)
class Heading:
    text: tuple = ()


@dataclass(frozen=True)
class Code:
    text: str


@dataclass(frozen=True)
class ListItem:
    number: str = ""
    content: tuple = ()


@dataclass(frozen=True)
class List:
    items: tuple = ()
    blank_between: bool = False


@dataclass(frozen=True)
class LinkDef:
    text: str
    url: str


@dataclass(frozen=True)
class Comment:
    content: tuple = ()
    links: tuple = ()


# ── standard library packages ──

# Package name -> import path. Every top-level standard library package is
# listed, plus the sub-packages most often referenced from docs. Where two
# sub-packages share a name only one is listed: rand is math/rand, template
# is text/template.
STD_PACKAGES = {
    "bufio": "bufio",
    "bytes": "bytes",
    "cmp": "cmp",
    "context": "context",
    "crypto": "crypto",
    "embed": "embed",
    "encoding": "encoding",
    "errors": "errors",
    "expvar": "expvar",
    "flag": "flag",
    "fmt": "fmt",
    "hash": "hash",
    "html": "html",
    "image": "image",
    "io": "io",
    "iter": "iter",
    "log": "log",
    "maps": "maps",
    "math": "math",
    "mime": "mime",
    "net": "net",
    "os": "os",
    "path": "path",
    "plugin": "plugin",
    "reflect": "reflect",
    "regexp": "regexp",
    "runtime": "runtime",
    "slices": "slices",
    "sort": "sort",
    "strconv": "strconv",
    "strings": "strings",
    "structs": "structs",
    "sync": "sync",
    "syscall": "syscall",
    "testing": "testing",
    "time": "time",
    "unicode": "unicode",
    "unique": "unique",
    "unsafe": "unsafe",
    "weak": "weak",
    # sub-packages
    "tar": "archive/tar",
    "zip": "archive/zip",
    "gzip": "compress/gzip",
    "zlib": "compress/zlib",
    "heap": "container/heap",
    "list": "container/list",
    "ring": "container/ring",
    "aes": "crypto/aes",
    "cipher": "crypto/cipher",
    "ecdsa": "crypto/ecdsa",
    "ed25519": "crypto/ed25519",
    "hmac": "crypto/hmac",
    "md5": "crypto/md5",
    "rsa": "crypto/rsa",
    "sha1": "crypto/sha1",
    "sha256": "crypto/sha256",
    "sha512": "crypto/sha512",
    "tls": "crypto/tls",
    "x509": "crypto/x509",
    "sql": "database/sql",
    "base64": "encoding/base64",
    "binary": "encoding/binary",
    "csv": "encoding/csv",
    "hex": "encoding/hex",
    "json": "encoding/json",
    "pem": "encoding/pem",
    "xml": "encoding/xml",
    "ast": "go/ast",
    "doc": "go/doc",
    "format": "go/format",
    "parser": "go/parser",
    "token": "go/token",
    "types": "go/types",
    "crc32": "hash/crc32",
    "fs": "io/fs",
    "slog": "log/slog",
    "big": "math/big",
    "bits": "math/bits",
    "rand": "math/rand",
    "http": "net/http",
    "httptest": "net/http/httptest",
    "mail": "net/mail",
    "netip": "net/netip",
    "url": "net/url",
    "exec": "os/exec",
    "signal": "os/signal",
    "user": "os/user",
    "filepath": "path/filepath",
    "debug": "runtime/debug",
    "pprof": "runtime/pprof",
    "atomic": "sync/atomic",
    "fstest": "testing/fstest",
    "scanner": "text/scanner",
    "tabwriter": "text/tabwriter",
    "template": "text/template",
    "utf16": "unicode/utf16",
    "utf8": "unicode/utf8",
}


# ── parser ──

_NAME_RE = re.compile(r"^[^\W\d]\w*$")
_IMPORT_ELEM_RE = re.compile(r"^[A-Za-z0-9\-_~+][A-Za-z0-9\-._~+]*$")
_HEADING_RE = re.compile(r"^#[ \t]+(\S.*)$")
_LIST_MARKER_RE = re.compile(r"^([ \t]*)(?:([-*+•])|(\d+)[.)])(?:[ \t]+|$)")
_LINK_DEF_RE = re.compile(r"^\[([^\]]+)\]:[ \t]+(\S+)[ \t]*$")
_BRACKET_RE = re.compile(r"\[([^\[\]]+)\]")
_PUNCT = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


def _is_blank(line):
    return not line.strip()


def _is_indented(line):
    return line[:1] in (" ", "\t")


def _indent_width(line):
    return len(line) - len(line.lstrip(" \t"))


def _unindent(lines):
    return textwrap.dedent("\n".join(lines)).split("\n")


def _trim_blank(lines):
    start, end = 0, len(lines)
    while start < end and _is_blank(lines[start]):
        start += 1
    while end > start and _is_blank(lines[end - 1]):
        end -= 1
    return lines[start:end]


def _split_doc_name(text):
    before, _, name = text.rpartition(".")
    if not _NAME_RE.match(name):
        return text, "", False
    return before, name, True


def valid_import_path(path):
    if not path or path.startswith("-") or path.endswith("/") or "//" in path:
        return False
    for elem in path.split("/"):
        if not _IMPORT_ELEM_RE.match(elem) or elem.endswith("."):
            return False
    return True


class Parser:
    """Parse doc comment text into a :class:`Comment` tree.

    ``lookup_package(name)`` returns the import path of a package name or
    ``None``; ``lookup_symbol(recv, name)`` tells whether a symbol (or a
    method ``recv.name``) exists in the current package. Both are optional.
    """

    def __init__(
        self,
        lookup_package: Optional[Callable[[str], Optional[str]]] = None,
        lookup_symbol: Optional[Callable[[str, str], bool]] = None,
    ):
        self.lookup_package = lookup_package
        self.lookup_symbol = lookup_symbol
        self._links = {}

    def parse(self, text: str) -> Comment:
        lines = _unindent(text.split("\n"))
        lines, defs = self._extract_link_defs(lines)
        self._links = {d.text: d.url for d in defs}
        content = self._parse_lines(lines, in_item=False)
        return Comment(content=tuple(content), links=tuple(defs))

    # ── link definitions ──

    def _extract_link_defs(self, lines):
        lines = _trim_blank(lines)
        start = len(lines)
        while start > 0 and not _is_blank(lines[start - 1]):
            start -= 1
        tail = lines[start:]
        if not tail or not all(_LINK_DEF_RE.match(ln) for ln in tail):
            return lines, []
        defs = []
        for ln in tail:
            m = _LINK_DEF_RE.match(ln)
            defs.append(LinkDef(m.group(1), m.group(2)))
        return _trim_blank(lines[:start]), defs

    # ── blocks ──

    def _parse_lines(self, lines, in_item):
        blocks = []
        i = 0
        n = len(lines)
        while i < n:
            line = lines[i]
            if _is_blank(line):
                i += 1
                continue

            if _is_indented(line) or (in_item and _LIST_MARKER_RE.match(line)):
                j = i + 1
                while j < n:
                    nxt = lines[j]
                    if not (
                        _is_blank(nxt)
                        or _is_indented(nxt)
                        or (in_item and _LIST_MARKER_RE.match(nxt))
                    ):
                        break
                    j += 1
                span = _trim_blank(lines[i:j])
                if _LIST_MARKER_RE.match(span[0]):
                    blocks.append(self._parse_list(span))
                else:
                    blocks.append(Code("\n".join(_unindent(span)) + "\n"))
                i = j
                continue

            heading = _HEADING_RE.match(line)
            single = (i + 1 >= n or _is_blank(lines[i + 1])) and (i == 0 or _is_blank(lines[i - 1]))
            if heading and single:
                blocks.append(Heading(self._parse_text(heading.group(1).strip())))
                i += 1
                continue

            j = i
            while j < n and not _is_blank(lines[j]) and not _is_indented(lines[j]):
                if in_item and j > i and _LIST_MARKER_RE.match(lines[j]):
                    break
                j += 1
            blocks.append(Paragraph(self._parse_text("\n".join(lines[i:j]))))
            i = j
        return blocks

    def _parse_list(self, lines):
        base = _indent_width(lines[0])
        items = []
        current = None
        blank_between = False
        pending_blank = False
        for line in lines:
            if _is_blank(line):
                pending_blank = True
                if current is not None:
                    current[1].append("")
                continue
            m = _LIST_MARKER_RE.match(line)
            if m and _indent_width(line) <= base:
                if current is not None and pending_blank:
                    blank_between = True
                current = (m.group(3) or "", [line[m.end() :]])
                items.append(current)
            elif current is not None:
                current[1].append(line)
            pending_blank = False

        out = []
        for number, content in items:
            body = _trim_blank(_unindent_tail(content))
            blocks = self._parse_lines(body, in_item=True)
            out.append(ListItem(number=number, content=tuple(blocks)))
        return List(items=tuple(out), blank_between=blank_between)

    # ── inline text ──

    def _parse_text(self, text):
        out = []
        plain = []
        cursor = 0
        for start, end, inner in _inline_spans(text):
            plain.append(text[cursor:start])
            cursor = end
            if inner is not None:
                node = self._bracket(inner, text[:start], text[end:])
            else:
                node = Link(text=text[start:end], url=text[start:end], auto=True)
            if node is None:
                plain.append(text[start:end])
                continue
            if "".join(plain):
                out.append(Plain("".join(plain)))
            plain = []
            out.append(node)
        plain.append(text[cursor:])
        if "".join(plain):
            out.append(Plain("".join(plain)))
        return tuple(out)

    def _bracket(self, inner, before, after):
        key = " ".join(inner.split())
        if key in self._links:
            return Link(text=key, url=self._links[key])
        return self._doc_link(inner, before, after)

    def _doc_link(self, text, before, after):
        if before and not (before[-1] in _PUNCT or before[-1].isspace()):
            return None
        if after and not (after[0] in _PUNCT or after[0].isspace()):
            return None

        target = text[1:] if text.startswith("*") else text
        pkg, name, ok = _split_doc_name(target)
        recv = ""
        if ok and pkg:
            if _NAME_RE.match(pkg) and self._symbol(pkg, name):
                pkg, recv = "", pkg
            else:
                prefix, last, found = _split_doc_name(pkg)
                if found and prefix and self._package(prefix) is not None:
                    pkg, recv = prefix, last

        if pkg:
            path = self._package(pkg)
            if path is None:
                return None
            return DocLink(text=text, import_path=path, recv=recv, name=name)
        if not name or not self._symbol(recv, name):
            return None
        return DocLink(text=text, recv=recv, name=name)

    def _package(self, pkg):
        if "/" in pkg:
            return pkg if valid_import_path(pkg) else None
        if self.lookup_package is not None:
            path = self.lookup_package(pkg)
            if path:
                return path
        return STD_PACKAGES.get(pkg)

    def _symbol(self, recv, name):
        if self.lookup_symbol is None:
            return False
        return self.lookup_symbol(recv, name)


def _inline_spans(text):
    """Yield ``(start, end, inner)`` for brackets and URLs, leftmost first.

    ``inner`` is the bracketed text, or ``None`` for a URL.
    """
    urls = list(find_urls(text))
    pos = 0
    while True:
        bracket = _BRACKET_RE.search(text, pos)
        url = next((u for u in urls if u[0] >= pos), None)
        if url is not None and (bracket is None or url[0] < bracket.start()):
            yield url[0], url[1], None
            pos = url[1]
        elif bracket is not None:
            yield bracket.start(), bracket.end(), bracket.group(1)
            pos = bracket.end()
        else:
            return


def _unindent_tail(content):
    # The first line follows the list marker; the rest share an indentation
    head, rest = content[0], content[1:]
    return [head] + _unindent(rest) if rest else [head]


def parse(text, lookup_package=None, lookup_symbol=None):
    return Parser(lookup_package, lookup_symbol).parse(text)
