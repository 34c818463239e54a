"""
Top comment extraction.
"""

from __future__ import annotations

import logging

from .errors import MissingTopComment

LOG = logging.getLogger(__name__)

COMMENT_OPEN = "/*"
COMMENT_CLOSE = "*/"
_BOM = "\ufeff"


def top_comment_contents(glsl_src: str) -> str:
    """
    Return the text strictly between the leading ``/*`` and the next ``*/``.

    Only whitespace (and a byte order mark) may precede the comment.  The span
    is purely delimiter based: nested ``/*`` and interior ``//`` are left as-is.
    """

    if not glsl_src:
        raise MissingTopComment("source is empty")

    start = len(glsl_src) - len(glsl_src.lstrip(_BOM + " \t\r\n\f\v"))
    if not glsl_src.startswith(COMMENT_OPEN, start):
        raise MissingTopComment("source does not start with '/*'")

    start += len(COMMENT_OPEN)
    end = glsl_src.find(COMMENT_CLOSE, start)
    if end < 0:
        raise MissingTopComment("top comment is not terminated")

    LOG.debug("Found top comment spanning characters %d..%d", start, end)
    return glsl_src[start:end]
