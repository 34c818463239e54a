"""
Serializer: :class:`~isf.model.Isf` -> generic JSON tree.

The output is exactly what :class:`~isf.mapper.SchemaMapper` accepts, so
``SchemaMapper().map(Serializer().serialize(isf)) == isf``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .config import DEFAULT_CONFIG, IsfConfig
from .inputs import (
    Input,
    InputAudio,
    InputAudioFFT,
    InputBool,
    InputColor,
    InputFloat,
    InputLong,
    InputPoint2D,
)
from .model import Isf, Pass, PersistentBuffer

LOG = logging.getLogger(__name__)

_RANGE_FIELDS = (("DEFAULT", "default"), ("MIN", "min"), ("MAX", "max"), ("IDENTITY", "identity"))


def _put(target: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value


def _kind_fields(kind: Any) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    if isinstance(kind, InputBool):
        _put(fields, "DEFAULT", kind.default)
    elif isinstance(kind, (InputLong, InputFloat)):
        for key, attr in _RANGE_FIELDS:
            _put(fields, key, getattr(kind, attr))
    elif isinstance(kind, (InputPoint2D, InputColor)):
        for key, attr in _RANGE_FIELDS:
            value = getattr(kind, attr)
            _put(fields, key, list(value) if value is not None else None)
    elif isinstance(kind, InputAudio):
        _put(fields, "MAX", kind.num_samples)
    elif isinstance(kind, InputAudioFFT):
        _put(fields, "MAX", kind.num_columns)

    if isinstance(kind, InputLong):
        if kind.values:
            fields["VALUES"] = list(kind.values)
        if kind.labels:
            fields["LABELS"] = list(kind.labels)
    return fields


def serialize_input(item: Input) -> Dict[str, Any]:
    entry: Dict[str, Any] = {"NAME": item.name, "TYPE": item.type}
    _put(entry, "LABEL", item.label)
    entry.update(_kind_fields(item.kind))
    return entry


def serialize_pass(render_pass: Pass) -> Dict[str, Any]:
    entry: Dict[str, Any] = {}
    _put(entry, "TARGET", render_pass.target)
    if render_pass.persistent:
        entry["PERSISTENT"] = True
    if render_pass.float:
        entry["FLOAT"] = True
    _put(entry, "WIDTH", render_pass.width)
    _put(entry, "HEIGHT", render_pass.height)
    return entry


def _serialize_buffer(buffer: PersistentBuffer) -> Dict[str, Any]:
    entry: Dict[str, Any] = {}
    _put(entry, "WIDTH", buffer.width)
    _put(entry, "HEIGHT", buffer.height)
    if buffer.float:
        entry["FLOAT"] = True
    return entry


class Serializer:
    """
    Convert an :class:`Isf` back to the on-wire dict shape.

    Fields that are unset are omitted.  Empty container sections follow
    ``config.empty_sections``.
    """

    def __init__(self, config: Optional[IsfConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def serialize(self, isf: Isf) -> Dict[str, Any]:
        tree: Dict[str, Any] = {}
        _put(tree, "ISFVSN", isf.isfvsn)
        _put(tree, "VSN", isf.vsn)
        _put(tree, "DESCRIPTION", isf.description)
        _put(tree, "CREDIT", isf.credit)

        sections: List[tuple] = [
            ("CATEGORIES", list(isf.categories)),
            ("INPUTS", [serialize_input(item) for item in isf.inputs]),
            ("PASSES", [serialize_pass(item) for item in isf.passes]),
            ("IMPORTED", {name: {"PATH": image.path} for name, image in isf.imported.items()}),
            (
                "PERSISTENT_BUFFERS",
                {name: _serialize_buffer(buffer) for name, buffer in isf.persistent_buffers.items()},
            ),
        ]
        for key, value in sections:
            if value or self._keep_empty(isf, key):
                tree[key] = value

        LOG.debug("Serialized ISF document with keys %s", sorted(tree))
        return tree

    def _keep_empty(self, isf: Isf, key: str) -> bool:
        policy = self.config.empty_sections
        if policy == "always":
            return True
        if policy == "preserve":
            return key in isf.explicit_sections
        return False
