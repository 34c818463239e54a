"""
ISF document model.

:class:`Isf` is the "top-level dict" of an ISF shader.  All values are
immutable; use :func:`dataclasses.replace` to derive a modified copy, which
re-runs validation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional, Tuple

from .errors import DuplicateInputName, StructuralMismatch
from .inputs import Input

# Container sections of the top-level dict, in wire order.
SECTION_KEYS = ("CATEGORIES", "INPUTS", "PASSES", "IMPORTED", "PERSISTENT_BUFFERS")


def _size(value: Optional[object]) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True, slots=True)
class Pass:
    """
    One render pass.

    ``width``/``height`` hold size expressions such as ``"$WIDTH/2"``;
    ``None`` means the pass matches the viewport.
    """

    target: Optional[str] = None
    persistent: bool = False
    float: bool = False
    width: Optional[str] = None
    height: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "persistent", bool(self.persistent))
        object.__setattr__(self, "float", bool(self.float))
        object.__setattr__(self, "width", _size(self.width))
        object.__setattr__(self, "height", _size(self.height))


@dataclass(frozen=True, slots=True)
class ImportedImage:
    """An external image bound to a sampler of the same name."""

    path: str

    def __post_init__(self) -> None:
        if not isinstance(self.path, str):
            raise StructuralMismatch("PATH", "a string", type(self.path).__name__)


@dataclass(frozen=True, slots=True)
class PersistentBuffer:
    width: Optional[str] = None
    height: Optional[str] = None
    float: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "width", _size(self.width))
        object.__setattr__(self, "height", _size(self.height))
        object.__setattr__(self, "float", bool(self.float))


@dataclass(frozen=True)
class Isf:
    """
    Structured representation of the JSON blob in a shader's top comment.

    ``explicit_sections`` records which of :data:`SECTION_KEYS` the source
    spelled out, so an explicitly empty ``"PASSES": []`` can be written back.
    It does not take part in equality.
    """

    description: Optional[str] = None
    credit: Optional[str] = None
    categories: Tuple[str, ...] = ()
    inputs: Tuple[Input, ...] = ()
    passes: Tuple[Pass, ...] = ()
    imported: Mapping[str, ImportedImage] = field(default_factory=dict)
    persistent_buffers: Mapping[str, PersistentBuffer] = field(default_factory=dict)
    isfvsn: Optional[str] = None
    vsn: Optional[str] = None
    explicit_sections: FrozenSet[str] = field(default=frozenset(), compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "categories", tuple(self.categories))
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "passes", tuple(self.passes))
        object.__setattr__(self, "imported", MappingProxyType(dict(self.imported)))
        object.__setattr__(self, "persistent_buffers", MappingProxyType(dict(self.persistent_buffers)))
        object.__setattr__(self, "explicit_sections", frozenset(self.explicit_sections))
        _check_unique_names(self.inputs)

    def __hash__(self) -> int:
        return hash(
            (
                self.description,
                self.credit,
                self.categories,
                self.inputs,
                self.passes,
                frozenset(self.imported.items()),
                frozenset(self.persistent_buffers.items()),
                self.isfvsn,
                self.vsn,
            )
        )

    def input_named(self, name: str) -> Optional[Input]:
        for candidate in self.inputs:
            if candidate.name == name:
                return candidate
        return None


def _check_unique_names(inputs: Iterable[Input]) -> None:
    seen: set[str] = set()
    for index, item in enumerate(inputs):
        if item.name in seen:
            raise DuplicateInputName(item.name, f"INPUTS[{index}]")
        seen.add(item.name)
