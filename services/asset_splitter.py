"""
Split a generated single-file HTML document into HTML, CSS and JS buffers.

Matching is done with regular expressions over the raw text, first match
only. A document with several <style> or <script> blocks keeps every block
after the first embedded in the HTML. Anything that does not match is left
alone; this module never raises on odd input.
"""
import logging
import re
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)

STYLE_BLOCK = re.compile(r"<style[^>]*>([\s\S]*?)</style>", re.IGNORECASE)
SCRIPT_BLOCK = re.compile(r"<script[^>]*>([\s\S]*?)</script>", re.IGNORECASE)

STYLESHEET_LINK = '<link rel="stylesheet" href="style.css">'
SCRIPT_REFERENCE = '<script src="script.js"></script>'


class SplitAssets(NamedTuple):
    html: str
    css: str
    js: str


def _extract_first(pattern: re.Pattern, document: str, replacement: str):
    match = pattern.search(document)
    if not match or not match.group(1):
        return document, ""
    inner = match.group(1).strip()
    # Slice instead of pattern.sub so backslashes in the replacement stay literal
    rewritten = document[:match.start()] + replacement + document[match.end():]
    return rewritten, inner


def split(html_document: Optional[str]) -> SplitAssets:
    """Pull the first style and the first script block out into their own files."""
    if not html_document:
        return SplitAssets("", "", "")

    html, css = _extract_first(STYLE_BLOCK, html_document, STYLESHEET_LINK)
    html, js = _extract_first(SCRIPT_BLOCK, html, SCRIPT_REFERENCE)

    logger.debug(f"Split document: html={len(html)} css={len(css)} js={len(js)} chars")
    return SplitAssets(html=html, css=css, js=js)
