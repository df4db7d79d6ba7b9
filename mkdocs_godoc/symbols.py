"""
Documentation units below the package level: struct fields and examples.
"""

from __future__ import annotations

from .lang import Doc
from .text import extract_summary, split_camel


class Example:
    """A runnable example attached to a package, type or field.

    ``name`` is the suffix after the documented symbol's name (``""`` for
    the default example), e.g. ``basicUsage`` for ``Example_basicUsage``.
    """

    def __init__(self, cfg, name, doc="", code="", output=""):
        self.cfg = cfg
        self.name = name
        self._doc = doc
        self.code = code
        self.output = output

    @property
    def level(self):
        return self.cfg.level

    @property
    def title(self):
        if not self.name:
            return "Example"
        return f"Example ({split_camel(self.name)})"

    @property
    def summary(self):
        return extract_summary(self._doc)

    @property
    def doc(self):
        return Doc(self.cfg.inc(1), self._doc)


class Field:
    """One documented field of a struct type."""

    def __init__(self, cfg, name, doc="", examples=()):
        self.cfg = cfg
        self.name = name
        self._doc = doc
        self._examples = examples

    @property
    def level(self):
        return self.cfg.level

    @property
    def title(self):
        return f"Field {self.name}"

    @property
    def summary(self):
        return extract_summary(self._doc)

    @property
    def doc(self):
        return Doc(self.cfg.inc(1), self._doc)

    @property
    def examples(self):
        """Examples whose name is the field name or ``<field>_<suffix>``.

        ``examples`` given to the constructor are ``(name, doc, code)`` or
        ``(name, doc, code, output)`` tuples using the full example name.
        """
        prefix = f"{self.name}_"
        out = []
        for full_name, doc, code, *rest in self._examples:
            if full_name == self.name:
                suffix = ""
            elif full_name.startswith(prefix):
                suffix = full_name[len(prefix) :]
            else:
                continue
            out.append(Example(self.cfg.inc(1), suffix, doc, code, *rest[:1]))
        return out
