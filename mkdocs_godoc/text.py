"""
Text helpers shared by the documentation model: line-ending normalization,
whitespace collapsing, one-sentence summaries and identifier word splitting.
"""

from __future__ import annotations

import re

_CRLF_RE = re.compile(r"\r\n")
_WHITESPACE_RE = re.compile(r"\s+")

# Words whose trailing period does not end a sentence
_ABBREVIATIONS = frozenset(
    {"Dr", "Mr", "Mrs", "Ms", "Prof", "St", "Jr", "Sr", "vs", "e.g", "i.e"}
)


def normalize_doc(doc):
    return _CRLF_RE.sub("\n", doc).strip()


def collapse_whitespace(text):
    return _WHITESPACE_RE.sub(" ", text)


def format_doc_paragraph(paragraph):
    return " ".join(line.strip() for line in paragraph.split("\n"))


def _is_initial(lookback2, lookback3):
    # A lone capital letter, as in "J. Smith"
    return lookback2.isupper() and not lookback3.isalpha() and not lookback3.isdigit()


def _is_abbreviation(text):
    word = text[:-1].rsplit(" ", 1)[-1]
    return word in _ABBREVIATIONS


def extract_summary(doc):
    """Return the first sentence of a documentation comment.

    The comment is cut to its first paragraph, re-flowed onto one line and
    ended at the first ". " that does not follow an initial or a common
    abbreviation. A trailing period is added when missing.
    """
    first = normalize_doc(doc)
    idx = first.find("\n\n")
    if idx != -1:
        first = first[:idx]

    out = []
    lookback1 = lookback2 = lookback3 = ""
    for ch in format_doc_paragraph(first):
        if ch == " " and lookback1 == ".":
            if not _is_initial(lookback2, lookback3) and not _is_abbreviation("".join(out)):
                break
        out.append(ch)
        lookback3, lookback2, lookback1 = lookback2, lookback1, ch

    if lookback1 and lookback1 != ".":
        out.append(".")
    return "".join(out)


def _is_upper(ch):
    return "A" <= ch <= "Z"


def split_camel(text):
    """Split a camel-cased identifier into space separated words.

    ``HTTPServer`` becomes ``HTTP Server`` and ``fooBar`` becomes
    ``foo Bar``. The first character always counts as upper case when
    looking for word starts; its case is left as is.
    """
    if not text:
        return ""

    out = [text[0]]
    previous_upper = True
    word_length = 0
    for ch in text[1:]:
        upper = _is_upper(ch)
        if previous_upper and not upper and word_length > 0:
            # A capital followed by a lower case letter starts a new word
            out.insert(len(out) - 1, " ")
            word_length = 1
        elif not previous_upper and upper:
            out.append(" ")
            word_length = 0
        else:
            word_length += 1
        out.append(ch)
        previous_upper = upper
    return "".join(out)
