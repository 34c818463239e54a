"""
Typed ISF inputs.

Each ``TYPE`` string maps to one frozen variant class carrying only the
fields that type may declare.  :data:`INPUT_KINDS` is the single dispatch
table used by both the mapper and the serializer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Dict, Optional, Sequence, Tuple, Type, Union

from .errors import InvalidEnumeration, InvalidRange, SchemaError, StructuralMismatch

Point = Tuple[float, float]
Rgba = Tuple[float, float, float, float]

RANGE_KEYS = ("DEFAULT", "MIN", "MAX", "IDENTITY")


def _finite(value: float, field: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise StructuralMismatch(field, "a finite number", repr(value))
    return number


def _vector(value: Optional[Sequence[float]], size: int, field: str) -> Optional[Tuple[float, ...]]:
    if value is None:
        return None
    components = tuple(_finite(component, field) for component in value)
    if len(components) != size:
        raise StructuralMismatch(field, f"an array of {size} numbers", f"{len(components)} components")
    return components


def _check_range(low, default, high) -> None:
    """
    Enforce ``MIN <= MAX`` and, when all three are set, ``MIN <= DEFAULT <= MAX``.

    Vectors are compared component-wise.
    """

    def as_tuple(value) -> Tuple[float, ...]:
        return tuple(value) if isinstance(value, tuple) else (value,)

    if low is None or high is None:
        return
    for index, (lo, hi) in enumerate(zip(as_tuple(low), as_tuple(high))):
        if lo > hi:
            raise InvalidRange(f"MIN {low!r} is greater than MAX {high!r} (component {index})")
    if default is None:
        return
    for index, (lo, value, hi) in enumerate(zip(as_tuple(low), as_tuple(default), as_tuple(high))):
        if not lo <= value <= hi:
            raise InvalidRange(f"DEFAULT {default!r} is outside [{low!r}, {high!r}] (component {index})")


@dataclass(frozen=True, slots=True)
class InputEvent:
    TYPE: ClassVar[str] = "event"
    KEYS: ClassVar[Tuple[str, ...]] = ()


@dataclass(frozen=True, slots=True)
class InputBool:
    TYPE: ClassVar[str] = "bool"
    KEYS: ClassVar[Tuple[str, ...]] = ("DEFAULT",)

    default: Optional[bool] = None

    def __post_init__(self) -> None:
        if self.default is not None:
            object.__setattr__(self, "default", bool(self.default))


@dataclass(frozen=True, slots=True)
class InputLong:
    """
    Integer input, optionally presented as a menu.

    ``values`` and ``labels`` are kept in declaration order; ``labels`` is
    either empty or exactly as long as ``values``.
    """

    TYPE: ClassVar[str] = "long"
    KEYS: ClassVar[Tuple[str, ...]] = RANGE_KEYS + ("VALUES", "LABELS")

    default: Optional[int] = None
    min: Optional[int] = None
    max: Optional[int] = None
    identity: Optional[int] = None
    values: Tuple[int, ...] = ()
    labels: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("default", "min", "max", "identity"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, int(value))
        values = tuple(int(value) for value in self.values)
        labels = tuple(str(label) for label in self.labels)
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "labels", labels)

        if len(set(values)) != len(values):
            raise InvalidEnumeration(f"VALUES must be distinct, got {list(values)}")
        if labels and len(labels) != len(values):
            raise InvalidEnumeration(
                f"LABELS has {len(labels)} entries but VALUES has {len(values)}"
            )
        _check_range(self.min, self.default, self.max)

    @property
    def options(self) -> Tuple[Tuple[int, Optional[str]], ...]:
        """``(value, label)`` pairs in declaration order."""

        if not self.labels:
            return tuple((value, None) for value in self.values)
        return tuple(zip(self.values, self.labels))


@dataclass(frozen=True, slots=True)
class InputFloat:
    TYPE: ClassVar[str] = "float"
    KEYS: ClassVar[Tuple[str, ...]] = RANGE_KEYS

    default: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    identity: Optional[float] = None

    def __post_init__(self) -> None:
        for name in ("default", "min", "max", "identity"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, _finite(value, name.upper()))
        _check_range(self.min, self.default, self.max)


@dataclass(frozen=True, slots=True)
class InputPoint2D:
    TYPE: ClassVar[str] = "point2D"
    KEYS: ClassVar[Tuple[str, ...]] = RANGE_KEYS

    default: Optional[Point] = None
    min: Optional[Point] = None
    max: Optional[Point] = None
    identity: Optional[Point] = None

    def __post_init__(self) -> None:
        for name in ("default", "min", "max", "identity"):
            object.__setattr__(self, name, _vector(getattr(self, name), 2, name.upper()))
        _check_range(self.min, self.default, self.max)


@dataclass(frozen=True, slots=True)
class InputColor:
    TYPE: ClassVar[str] = "color"
    KEYS: ClassVar[Tuple[str, ...]] = RANGE_KEYS

    default: Optional[Rgba] = None
    min: Optional[Rgba] = None
    max: Optional[Rgba] = None
    identity: Optional[Rgba] = None

    def __post_init__(self) -> None:
        for name in ("default", "min", "max", "identity"):
            object.__setattr__(self, name, _vector(getattr(self, name), 4, name.upper()))
        _check_range(self.min, self.default, self.max)


@dataclass(frozen=True, slots=True)
class InputImage:
    TYPE: ClassVar[str] = "image"
    KEYS: ClassVar[Tuple[str, ...]] = ()


def _check_count(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    count = int(value)
    if count < 0:
        raise InvalidRange(f"MAX must be a non-negative count, got {count}")
    return count


@dataclass(frozen=True, slots=True)
class InputAudio:
    TYPE: ClassVar[str] = "audio"
    KEYS: ClassVar[Tuple[str, ...]] = ("MAX",)

    num_samples: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "num_samples", _check_count(self.num_samples))


@dataclass(frozen=True, slots=True)
class InputAudioFFT:
    TYPE: ClassVar[str] = "audioFFT"
    KEYS: ClassVar[Tuple[str, ...]] = ("MAX",)

    num_columns: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "num_columns", _check_count(self.num_columns))


InputKind = Union[
    InputEvent,
    InputBool,
    InputLong,
    InputFloat,
    InputPoint2D,
    InputColor,
    InputImage,
    InputAudio,
    InputAudioFFT,
]

INPUT_KINDS: Dict[str, Type[InputKind]] = {
    kind.TYPE: kind
    for kind in (
        InputEvent,
        InputBool,
        InputLong,
        InputFloat,
        InputPoint2D,
        InputColor,
        InputImage,
        InputAudio,
        InputAudioFFT,
    )
}

# Every key an input object may carry under some TYPE.
INPUT_KEYS = frozenset({"NAME", "TYPE", "LABEL"}).union(*(kind.KEYS for kind in INPUT_KINDS.values()))


@dataclass(frozen=True, slots=True)
class Input:
    """A declared shader parameter: name, optional UI label and typed payload."""

    name: str
    kind: InputKind
    label: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise SchemaError("input NAME must be a non-empty string")
        if type(self.kind) not in INPUT_KINDS.values():
            raise StructuralMismatch("kind", "an ISF input variant", type(self.kind).__name__)

    @property
    def type(self) -> str:
        return self.kind.TYPE
