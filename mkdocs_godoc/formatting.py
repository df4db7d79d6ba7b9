"""
Markdown formatting primitives.

Small pure functions that turn already-resolved text into Markdown: bold
spans, headers, links, list entries, code blocks and collapsible sections.
Also holds the character escaper (which leaves URLs alone) and the plain-text
reducer used to build anchor slugs from rendered headings.
"""

from __future__ import annotations

import html
import re

import markdown
from linkify_it import LinkifyIt
from markdown.treeprocessors import Treeprocessor
from markdown.util import AMP_SUBSTITUTE, HTML_PLACEHOLDER_RE


class InvalidLevel(ValueError):
    """Raised when a header is requested below level 1."""


_SPECIAL_CHAR_RE = re.compile(r"([\\`*_{}\[\]()<>#+\-!~])")

# Candidate schemes; no word boundary, so "_https://..." still finds the URL
_SCHEME_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9+.\-]*:")

# Only URLs with an explicit scheme count. linkify-it knows http(s), ftp and
# mailto; schemes without "//" are registered below, and any other
# "scheme://" is validated like http.
_LINKIFY = LinkifyIt(options={"fuzzy_link": False, "fuzzy_email": False, "fuzzy_ip": False})
_LINKIFY.add("tel:", {"validate": r"^\+?[0-9](?:[0-9().\-]*[0-9])?"})
_LINKIFY.add("sms:", "tel:")

_HEADER_MARKERS = {
    1: "#",
    2: "##",
    3: "###",
    4: "####",
    5: "#####",
}


def find_urls(text):
    """Yield ``(start, end)`` spans of the scheme-qualified URLs in text."""
    pos = 0
    while True:
        m = _SCHEME_RE.search(text, pos)
        if m is None:
            return
        length = _LINKIFY.test_schema_at(text, m.group(0).lower(), m.end())
        if not length and text.startswith("//", m.end()):
            length = _LINKIFY.test_schema_at(text, "http:", m.end())
        if length:
            yield m.start(), m.end() + length
            pos = m.end() + length
        else:
            # Retry from the next character so "xmailto:" still finds "mailto:"
            pos = m.start() + 1


def _escape_raw(segment):
    return _SPECIAL_CHAR_RE.sub(r"\\\1", segment)


def escape(text):
    """Backslash-escape Markdown special characters outside of URLs.

    URLs must carry a scheme (``https://``, ``mailto:`` ...) to be recognized.
    Escaping is not idempotent: escaping twice escapes the inserted
    backslashes again.
    """
    out = []
    cursor = 0
    for start, end in find_urls(text):
        if start > cursor:
            out.append(_escape_raw(text[cursor:start]))
        out.append(text[start:end])
        cursor = end
    if len(text) > cursor:
        out.append(_escape_raw(text[cursor:]))
    return "".join(out)


def bold(text):
    if not text:
        return ""
    return f"**{escape(text)}**"


def header(level, text):
    if level < 1:
        raise InvalidLevel(f"header level cannot be less than 1 (got {level})")
    # Only six levels exist; anything deeper renders as level 6
    return f"{_HEADER_MARKERS.get(level, '######')} {text}"


def link(text, href):
    if not text:
        return ""
    if not href:
        return text
    return f"[{text}](<{href}>)"


def list_entry(depth, text):
    # Empty entries vanish entirely instead of rendering a bare marker
    if not text:
        return ""
    return f"{'  ' * depth}- {text}"


def paragraph(text):
    return text


def code_block(code):
    """Indented code block: every line, blank ones included, gets a tab."""
    return "\n".join(f"\t{line}" for line in code.split("\n"))


def fenced_code_block(language, code):
    return f"```{language}\n{code.strip()}\n```"


def collapsible_section_header(title):
    """Open a collapsible section.

    Must be closed with :func:`collapsible_section_terminator` once the body
    has been written. Sections opened this way must not interleave.
    """
    return f"<details><summary>{title}</summary>\n<p>"


def collapsible_section_terminator():
    return "</p>\n</details>"


def collapsible_section(title, body):
    """Render a whole collapsible section.

    A string body is escaped. A callable body is invoked once to produce
    already-rendered Markdown, which is emitted as-is between the header and
    the terminator.
    """
    if callable(body):
        return collapsible_section_header(title) + body() + collapsible_section_terminator()
    return f"<details><summary>{title}</summary>\n<p>{escape(body)}</p>\n</details>"


# ── plain-text reduction ──

_BLOCK_TAGS = frozenset({"p", "pre", "h1", "h2", "h3", "h4", "h5", "h6"})

# Characters escape() emits that Python-Markdown does not unescape by default
_EXTRA_ESCAPED_CHARS = ("<", "~")

_ENTITY_RE = re.compile(r"&(?:#[0-9]+|#x[0-9a-fA-F]+|[a-zA-Z0-9]+);")


class _TreeCapture(Treeprocessor):
    """Keeps the final element tree of a conversion around for inspection."""

    root = None

    def run(self, root):
        self.root = root


def _collect_text(element, parts):
    if element.text:
        parts.append(element.text)
    children = list(element)
    for i, child in enumerate(children):
        _collect_text(child, parts)
        block = child.tag in _BLOCK_TAGS
        if block and i < len(children) - 1:
            parts.append(" ")
        # Tails of block elements are only pretty-printing newlines
        if child.tail and not block:
            parts.append(child.tail)


def _stashed_entity(md, match):
    # Entities are stashed like raw HTML; keep their character, drop the HTML
    raw = md.htmlStash.rawHtmlBlocks[int(match.group(1))]
    if isinstance(raw, str) and _ENTITY_RE.fullmatch(raw):
        return html.unescape(raw)
    return ""


def plain_text(text):
    """Reduce rendered Markdown to the text a reader would see.

    Only meant for headings turned into anchors; it is not a general
    un-rendering tool.
    """
    md = markdown.Markdown(extensions=["fenced_code"])
    md.ESCAPED_CHARS = md.ESCAPED_CHARS + [c for c in _EXTRA_ESCAPED_CHARS if c not in md.ESCAPED_CHARS]
    capture = _TreeCapture(md)
    # Lowest priority so that inline parsing and unescaping have already run
    md.treeprocessors.register(capture, "godoc_capture", -100)
    md.convert(text)

    parts = []
    if capture.root is not None:
        _collect_text(capture.root, parts)
    # The root keeps a pretty-printing newline ahead of its first block
    result = "".join(parts).strip()
    result = HTML_PLACEHOLDER_RE.sub(lambda m: _stashed_entity(md, m), result)
    return result.replace(AMP_SUBSTITUTE, "&")
