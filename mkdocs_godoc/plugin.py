"""
MkDocs plugin rendering Go doc comments written inline in Markdown pages.

A page can contain directives such as::

    ::: go:doc
        :package: docs
        :symbols: Func Type
        :level: 3

        Package docs does things with [Type].

        # Usage
        ...

    ::: go:field
        :name: Volume
        :package: core

        Volume is the size of the volume in bytes.

Each directive body is parsed as a doc comment, cross-references are
resolved against the configured package and symbols, and the result replaces
the directive in the page Markdown.
"""

from __future__ import annotations

import logging
import re
import textwrap

from mkdocs.config import config_options
from mkdocs.config.base import Config as MkDocsConfig
from mkdocs.plugins import BasePlugin

from .formatting import InvalidLevel
from .lang import Config, Doc
from .links import DEFAULT_PACKAGE_HOST
from .renderer import RenderConfig, render_doc, render_field
from .symbols import Field

log = logging.getLogger("mkdocs.plugins.godoc")

_DIRECTIVE_RE = re.compile(
    r"^(?P<indent>[ \t]*):::[ \t]+go:(?P<directive>doc|field)[ \t]*(?:\n|\Z)"
    r"(?P<body>(?:(?P=indent)[ \t]+.*(?:\n|\Z)|[ \t]*\n)*)",
    re.MULTILINE,
)
_OPTION_RE = re.compile(r"^:(\w+):\s*(.*)$")

_CODE_STYLES = ("indented", "fenced")


class GodocConfig(MkDocsConfig):
    heading_level = config_options.Type(int, default=2)
    current_package = config_options.Type(str, default="")
    symbols = config_options.Type(list, default=[])
    package_host = config_options.Type(str, default=DEFAULT_PACKAGE_HOST)
    code_style = config_options.Choice(_CODE_STYLES, default="indented")
    language = config_options.Type(str, default="go")


def split_directive_body(body):
    """Split a directive body into its ``:name: value`` options and text."""
    lines = textwrap.dedent(body).split("\n")
    opts = {}
    i = 0
    while i < len(lines):
        m = _OPTION_RE.match(lines[i].strip())
        if not m:
            break
        opts[m.group(1)] = m.group(2).strip()
        i += 1
    return opts, "\n".join(lines[i:]).strip("\n")


class GodocPlugin(BasePlugin[GodocConfig]):
    def _doc_config(self, opts):
        level = self.config["heading_level"]
        if "level" in opts:
            try:
                level = int(opts["level"])
            except ValueError:
                log.warning("godoc: bad :level: %r, using %d", opts["level"], level)
        symbols = list(self.config["symbols"])
        if "symbols" in opts:
            symbols += opts["symbols"].replace(",", " ").split()
        return Config(
            level=level,
            current_package=opts.get("package", self.config["current_package"]),
            symbols=symbols,
            host=self.config["package_host"],
        )

    def _render_config(self):
        return RenderConfig(code_style=self.config["code_style"], language=self.config["language"])

    def _handle_directive(self, match, page=None):
        directive = match.group("directive")
        opts, text = split_directive_body(match.group("body"))
        cfg = self._doc_config(opts)
        rcfg = self._render_config()
        src = getattr(getattr(page, "file", None), "src_uri", "?")
        try:
            if directive == "field":
                name = opts.get("name", "")
                if not name:
                    log.warning("godoc: go:field without :name: in %s", src)
                    return "<!-- godoc: missing :name: for go:field -->\n\n"
                md = render_field(Field(cfg, name, text), rcfg)
            else:
                md = render_doc(Doc(cfg, text), rcfg, title=opts.get("title"))
        except InvalidLevel as exc:
            log.warning("godoc: %s in %s", exc, src)
            return f"<!-- godoc: {exc} -->\n\n"
        log.debug("godoc: rendered go:%s directive in %s", directive, src)
        return f"{md}\n\n"

    def on_page_markdown(self, markdown, *, page, config, files, **kwargs):
        return _DIRECTIVE_RE.sub(lambda m: self._handle_directive(m, page), markdown)
