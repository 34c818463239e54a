"""
Entry points composing extraction, decoding, mapping and serialization.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from . import codec
from .comment import top_comment_contents
from .config import DEFAULT_CONFIG, IsfConfig
from .mapper import SchemaMapper
from .model import Isf
from .serializer import Serializer

LOG = logging.getLogger(__name__)


def parse(glsl_src: str, config: Optional[IsfConfig] = None) -> Isf:
    """
    Parse the ISF blob from the top comment of a GLSL source string.

    No GLSL parsing happens; only the leading ``/* */`` comment is read.
    Raises a subclass of :class:`~isf.errors.IsfError` on failure.
    """

    contents = top_comment_contents(glsl_src)
    return from_json(contents, config)


def from_json(text: str, config: Optional[IsfConfig] = None) -> Isf:
    """Parse a bare JSON document (no surrounding comment)."""

    tree = codec.decode(text)
    LOG.debug("Decoded %d characters of ISF JSON", len(text))
    return from_tree(tree, config)


def from_tree(tree: Any, config: Optional[IsfConfig] = None) -> Isf:
    return SchemaMapper(config).map(tree)


def serialize(isf: Isf, config: Optional[IsfConfig] = None) -> Dict[str, Any]:
    return Serializer(config).serialize(isf)


def to_json(isf: Isf, config: Optional[IsfConfig] = None) -> str:
    config = config or DEFAULT_CONFIG
    return codec.encode(serialize(isf, config), indent=config.indent)
