"""HTML-to-text normalisation for status announcements."""

from __future__ import annotations

import html as html_lib
import re

from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError

from closurewatch.log import get_logger

logger = get_logger("closurewatch.scraper.extractor")

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------
_SCRIPT_STYLE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
# An unterminated script/style block swallows the rest of the document.
_UNCLOSED_SCRIPT_STYLE = re.compile(r"<(?:script|style)\b.*\Z", re.IGNORECASE | re.DOTALL)
_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_LINE_BREAK = re.compile(r"<br\s*/?>", re.IGNORECASE)
_BLOCK_CLOSE = re.compile(r"</(?:p|div|li|h[1-6]|tr|td|th)\s*>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]*>")
_STRAY_BRACKET = re.compile(r"[<>]")
_INLINE_SPACE = re.compile(r"[ \t\f\v\u00a0]+")


def normalize_html(html: str) -> str:
    """Turn an HTML document into clean, line-oriented plain text.

    Markup is removed before entities are decoded, and any angle bracket
    left after decoding is dropped, so the result never contains `<` or `>`.  It
    holds one trimmed, non-empty line per block element.
    """
    if not html:
        return ""

    text = _SCRIPT_STYLE.sub(" ", html)
    text = _UNCLOSED_SCRIPT_STYLE.sub(" ", text)
    text = _COMMENT.sub(" ", text)
    text = _LINE_BREAK.sub("\n", text)
    text = _BLOCK_CLOSE.sub("\n", text)
    text = _TAG.sub(" ", text)
    text = html_lib.unescape(text)
    # Stray brackets, including decoded &lt; / &gt;, must not reintroduce markup.
    text = _STRAY_BRACKET.sub(" ", text)

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _INLINE_SPACE.sub(" ", text)
    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


def select_announcement(html: str, selector: str | None) -> str:
    """Narrow *html* to the elements matching the CSS *selector*.

    Returns the whole document when no selector is given, nothing matches, or
    the selector cannot be parsed.
    """
    if not selector or not html:
        return html

    try:
        soup = BeautifulSoup(html, "html.parser")
        matches = soup.select(selector)
    except (SelectorSyntaxError, ValueError) as exc:
        logger.warning("Announcement selector %r failed (%s); using whole page", selector, exc)
        return html

    if not matches:
        logger.debug("Announcement selector %r matched nothing; using whole page", selector)
        return html
    return "\n".join(str(node) for node in matches)
