"""
mkdocs-godoc — Go doc comments rendered as Markdown.

Turns Go documentation comments into Markdown blocks for MkDocs pages:
headings, paragraphs, code and lists, with cross-references resolved to page
anchors or to the package documentation host, and text escaped without
breaking embedded URLs.
"""

__version__ = "0.3.0"
