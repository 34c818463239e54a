"""
Interactive Shader Format (ISF) descriptor parsing.

An ISF shader is GLSL whose leading ``/* */`` comment holds a JSON object
describing its inputs, render passes and imported images.  :func:`parse`
turns that comment into an immutable :class:`Isf`; :func:`serialize` and
:func:`to_json` write it back such that parsing the result yields an equal
value.

    import isf

    doc = isf.parse(source)
    for item in doc.inputs:
        print(item.name, item.type)
"""

from __future__ import annotations

__all__ = [
    "parse",
    "from_json",
    "from_tree",
    "serialize",
    "to_json",
    "top_comment_contents",
    "IsfConfig",
    "Isf",
    "Input",
    "InputEvent",
    "InputBool",
    "InputLong",
    "InputFloat",
    "InputPoint2D",
    "InputColor",
    "InputImage",
    "InputAudio",
    "InputAudioFFT",
    "INPUT_KINDS",
    "Pass",
    "ImportedImage",
    "PersistentBuffer",
    "IsfError",
    "MissingTopComment",
    "MalformedJson",
    "SchemaError",
    "StructuralMismatch",
    "MissingRequiredField",
    "UnknownInputType",
    "InvalidRange",
    "InvalidEnumeration",
    "DuplicateInputName",
    "UnknownField",
]

from .comment import top_comment_contents
from .config import IsfConfig
from .errors import (
    DuplicateInputName,
    InvalidEnumeration,
    InvalidRange,
    IsfError,
    MalformedJson,
    MissingRequiredField,
    MissingTopComment,
    SchemaError,
    StructuralMismatch,
    UnknownField,
    UnknownInputType,
)
from .inputs import (
    INPUT_KINDS,
    Input,
    InputAudio,
    InputAudioFFT,
    InputBool,
    InputColor,
    InputEvent,
    InputFloat,
    InputImage,
    InputLong,
    InputPoint2D,
)
from .model import ImportedImage, Isf, Pass, PersistentBuffer
from .parser import from_json, from_tree, parse, serialize, to_json
