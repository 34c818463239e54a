"""
Error taxonomy for ISF parsing.

Every error raised by the package derives from :class:`IsfError`, so hosts
that only want to know "is this an ISF shader?" can catch a single class and
fall back to treating the source as plain GLSL.
"""

from __future__ import annotations

from typing import Optional


class IsfError(ValueError):
    """Base class for ISF related errors."""

    stage = "isf"


class MissingTopComment(IsfError):
    """Raised when the source does not start with a ``/* */`` block."""

    stage = "extract"

    def __init__(self, reason: str = "no leading comment block") -> None:
        super().__init__(f"failed to find the top comment containing the JSON blob: {reason}")
        self.reason = reason


class MalformedJson(IsfError):
    """Raised when the comment contents are not valid JSON."""

    stage = "decode"

    def __init__(self, msg: str, lineno: int = 0, colno: int = 0, pos: int = 0) -> None:
        super().__init__(f"failed to parse JSON from the top comment: {msg} (line {lineno}, column {colno})")
        self.msg = msg
        self.lineno = lineno
        self.colno = colno
        self.pos = pos


class SchemaError(IsfError):
    """
    Raised when the JSON tree does not describe a valid ISF document.

    ``path`` locates the offending value, e.g. ``INPUTS[2].MAX``.  It is
    empty for errors raised while building model values directly.
    """

    stage = "map"

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path or ""

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class StructuralMismatch(SchemaError):
    """A value has the wrong JSON shape, or a key is illegal for its input type."""

    def __init__(
        self,
        field: str,
        expected: str,
        actual: str,
        path: Optional[str] = None,
    ) -> None:
        super().__init__(f"'{field}' must be {expected}, got {actual}", path)
        self.field = field
        self.expected = expected
        self.actual = actual


class MissingRequiredField(SchemaError):
    def __init__(self, field: str, path: Optional[str] = None) -> None:
        super().__init__(f"missing required field '{field}'", path)
        self.field = field


class UnknownInputType(SchemaError):
    def __init__(self, input_name: str, type_name: str, index: int, path: Optional[str] = None) -> None:
        super().__init__(f"input '{input_name}' (#{index}) has unknown TYPE '{type_name}'", path)
        self.input_name = input_name
        self.type_name = type_name
        self.index = index


class InvalidRange(SchemaError):
    """MIN/MAX/DEFAULT (or a count) violate the required ordering."""


class InvalidEnumeration(InvalidRange):
    """A ``long`` input's VALUES/LABELS do not form a valid enumeration."""


class DuplicateInputName(SchemaError):
    def __init__(self, name: str, path: Optional[str] = None) -> None:
        super().__init__(f"duplicate input name '{name}'", path)
        self.name = name


class UnknownField(SchemaError):
    """Raised for unrecognised keys when the ``unknown_keys`` policy is ``error``."""

    def __init__(self, field: str, path: Optional[str] = None) -> None:
        super().__init__(f"unknown field '{field}'", path)
        self.field = field
