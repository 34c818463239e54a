"""
Schema mapper: generic JSON tree -> :class:`~isf.model.Isf`.

The mapper checks JSON shapes and reports them with a path such as
``INPUTS[2].MAX``; value invariants (ranges, enumerations, uniqueness) are
enforced by the model constructors and re-raised here with the same path.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Type, TypeVar

from .config import DEFAULT_CONFIG, IsfConfig
from .errors import (
    DuplicateInputName,
    MissingRequiredField,
    SchemaError,
    StructuralMismatch,
    UnknownField,
    UnknownInputType,
)
from .inputs import (
    INPUT_KEYS,
    INPUT_KINDS,
    Input,
    InputAudio,
    InputAudioFFT,
    InputBool,
    InputColor,
    InputEvent,
    InputFloat,
    InputImage,
    InputKind,
    InputLong,
    InputPoint2D,
)
from .model import SECTION_KEYS, ImportedImage, Isf, Pass, PersistentBuffer

LOG = logging.getLogger(__name__)

T = TypeVar("T")
Reader = Callable[..., T]

SCALAR_KEYS = ("ISFVSN", "VSN", "DESCRIPTION", "CREDIT")
TOP_LEVEL_KEYS = frozenset(SCALAR_KEYS + SECTION_KEYS)
PASS_KEYS = frozenset({"TARGET", "PERSISTENT", "FLOAT", "WIDTH", "HEIGHT"})
BUFFER_KEYS = frozenset({"WIDTH", "HEIGHT", "FLOAT"})
IMPORT_KEYS = frozenset({"PATH"})

# ``long`` values are 32-bit signed, audio sample/column counts 32-bit unsigned.
I32_MIN = -(2**31)
I32_MAX = 2**31 - 1
U32_MAX = 2**32 - 1


def json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


@contextmanager
def _located(path: str) -> Iterator[None]:
    try:
        yield
    except SchemaError as exc:
        if not exc.path:
            exc.path = path
        raise


# ------------------------------------------------------------------ value readers


def _object(value: Any, field: str, path: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise StructuralMismatch(field, "an object", json_type(value), path)
    return value


def _string(value: Any, field: str, path: str) -> str:
    if not isinstance(value, str):
        raise StructuralMismatch(field, "a string", json_type(value), path)
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number(value: Any, field: str, path: str) -> float:
    if not _is_number(value):
        raise StructuralMismatch(field, "a number", json_type(value), path)
    try:
        number = float(value)
    except OverflowError:
        raise StructuralMismatch(field, "a finite number", "an integer too large for a float", path) from None
    if not math.isfinite(number):
        raise StructuralMismatch(field, "a finite number", repr(value), path)
    return number


def _integer(value: Any, field: str, path: str, low: int = I32_MIN, high: int = I32_MAX) -> int:
    # Integers are kept exact; floats only pass when integral.
    if isinstance(value, int) and not isinstance(value, bool):
        number = value
    else:
        real = _number(value, field, path)
        if not real.is_integer():
            raise StructuralMismatch(field, "an integer", repr(value), path)
        number = int(real)
    if not low <= number <= high:
        raise StructuralMismatch(field, f"an integer in [{low}, {high}]", "an out-of-range integer", path)
    return number


def _count(value: Any, field: str, path: str) -> int:
    return _integer(value, field, path, 0, U32_MAX)


def _boolean(value: Any, field: str, path: str) -> bool:
    # Numbers are accepted as 0 / non-zero, as many published shaders use them.
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, float):
        return int(_number(value, field, path)) != 0
    raise StructuralMismatch(field, "a boolean", json_type(value), path)


def _text(value: Any, field: str, path: str) -> str:
    """String field that also accepts a bare number, e.g. ``"WIDTH": 512``."""

    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    _number(value, field, path)
    return str(value)


def _array(value: Any, field: str, path: str, item: Reader[T]) -> List[T]:
    if not isinstance(value, list):
        raise StructuralMismatch(field, "an array", json_type(value), path)
    return [item(entry, field, f"{path}[{index}]") for index, entry in enumerate(value)]


def _vector(size: int) -> Reader[Tuple[float, ...]]:
    def read(value: Any, field: str, path: str) -> Tuple[float, ...]:
        components = _array(value, field, path, _number)
        if len(components) != size:
            raise StructuralMismatch(field, f"an array of {size} numbers", f"{len(components)} elements", path)
        return tuple(components)

    return read


def _optional(obj: Dict[str, Any], key: str, path: str, reader: Reader[T], *args: Any) -> Optional[T]:
    value = obj.get(key)
    if value is None:
        return None
    return reader(value, key, _join(path, key), *args)


# ------------------------------------------------------------------ input variants


def _read_event(obj: Dict[str, Any], path: str) -> InputEvent:
    return InputEvent()


def _read_image(obj: Dict[str, Any], path: str) -> InputImage:
    return InputImage()


def _read_bool(obj: Dict[str, Any], path: str) -> InputBool:
    return InputBool(default=_optional(obj, "DEFAULT", path, _boolean))


def _read_long(obj: Dict[str, Any], path: str) -> InputLong:
    return InputLong(
        default=_optional(obj, "DEFAULT", path, _integer),
        min=_optional(obj, "MIN", path, _integer),
        max=_optional(obj, "MAX", path, _integer),
        identity=_optional(obj, "IDENTITY", path, _integer),
        values=tuple(_optional(obj, "VALUES", path, _array, _integer) or ()),
        labels=tuple(_optional(obj, "LABELS", path, _array, _string) or ()),
    )


def _read_float(obj: Dict[str, Any], path: str) -> InputFloat:
    return InputFloat(
        default=_optional(obj, "DEFAULT", path, _number),
        min=_optional(obj, "MIN", path, _number),
        max=_optional(obj, "MAX", path, _number),
        identity=_optional(obj, "IDENTITY", path, _number),
    )


def _vector_reader(kind: Type[T], size: int) -> Callable[[Dict[str, Any], str], T]:
    read = _vector(size)

    def read_kind(obj: Dict[str, Any], path: str) -> T:
        return kind(
            default=_optional(obj, "DEFAULT", path, read),
            min=_optional(obj, "MIN", path, read),
            max=_optional(obj, "MAX", path, read),
            identity=_optional(obj, "IDENTITY", path, read),
        )

    return read_kind


def _read_audio(obj: Dict[str, Any], path: str) -> InputAudio:
    return InputAudio(num_samples=_optional(obj, "MAX", path, _count))


def _read_audio_fft(obj: Dict[str, Any], path: str) -> InputAudioFFT:
    return InputAudioFFT(num_columns=_optional(obj, "MAX", path, _count))


_KIND_READERS: Dict[type, Callable[[Dict[str, Any], str], InputKind]] = {
    InputEvent: _read_event,
    InputBool: _read_bool,
    InputLong: _read_long,
    InputFloat: _read_float,
    InputPoint2D: _vector_reader(InputPoint2D, 2),
    InputColor: _vector_reader(InputColor, 4),
    InputImage: _read_image,
    InputAudio: _read_audio,
    InputAudioFFT: _read_audio_fft,
}


# ------------------------------------------------------------------ mapper


class SchemaMapper:
    """
    Build an :class:`Isf` from a decoded JSON tree.

    The first problem aborts the mapping; no partial document is returned.
    """

    def __init__(self, config: Optional[IsfConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def map(self, tree: Any) -> Isf:
        root = _object(tree, "ISF", "")
        self._check_keys(root, TOP_LEVEL_KEYS, "")

        explicit = frozenset(key for key in SECTION_KEYS if root.get(key) is not None)
        categories = _optional(root, "CATEGORIES", "", _array, _string) or []
        isf = Isf(
            description=_optional(root, "DESCRIPTION", "", _string),
            credit=_optional(root, "CREDIT", "", _string),
            categories=tuple(categories),
            inputs=self._inputs(root.get("INPUTS")),
            passes=self._passes(root.get("PASSES")),
            imported=self._imported(root.get("IMPORTED")),
            persistent_buffers=self._persistent_buffers(root.get("PERSISTENT_BUFFERS")),
            isfvsn=_optional(root, "ISFVSN", "", _text),
            vsn=_optional(root, "VSN", "", _text),
            explicit_sections=explicit,
        )
        LOG.debug(
            "Mapped ISF document: %d inputs, %d passes, %d imported images",
            len(isf.inputs),
            len(isf.passes),
            len(isf.imported),
        )
        return isf

    # ------------------------------------------------------------------ helpers

    def _check_keys(self, obj: Dict[str, Any], known: frozenset, path: str) -> None:
        for key in obj:
            if key not in known:
                self._unknown(key, path)

    def _unknown(self, key: str, path: str) -> None:
        policy = self.config.unknown_keys
        if policy == "error":
            raise UnknownField(key, _join(path, key))
        if policy == "warn":
            LOG.warning("Ignoring unknown ISF key '%s'", _join(path, key))

    # ------------------------------------------------------------------ sections

    def _inputs(self, raw: Any) -> Tuple[Input, ...]:
        if raw is None:
            return ()
        if not isinstance(raw, list):
            raise StructuralMismatch("INPUTS", "an array", json_type(raw), "INPUTS")
        seen: set[str] = set()
        inputs = []
        for index, entry in enumerate(raw):
            item = self._input(entry, index)
            if item.name in seen:
                raise DuplicateInputName(item.name, f"INPUTS[{index}]")
            seen.add(item.name)
            inputs.append(item)
        return tuple(inputs)

    def _input(self, raw: Any, index: int) -> Input:
        path = f"INPUTS[{index}]"
        obj = _object(raw, "INPUTS", path)

        if obj.get("NAME") is None:
            raise MissingRequiredField("NAME", path)
        name = _string(obj["NAME"], "NAME", _join(path, "NAME"))
        if not name:
            raise StructuralMismatch("NAME", "a non-empty string", "an empty string", _join(path, "NAME"))

        if obj.get("TYPE") is None:
            raise MissingRequiredField("TYPE", path)
        type_name = _string(obj["TYPE"], "TYPE", _join(path, "TYPE"))
        kind_cls = INPUT_KINDS.get(type_name)
        if kind_cls is None:
            raise UnknownInputType(name, type_name, index, _join(path, "TYPE"))

        for key, value in obj.items():
            if key in ("NAME", "TYPE", "LABEL") or key in kind_cls.KEYS:
                continue
            if key in INPUT_KEYS:
                if value is None:
                    continue
                raise StructuralMismatch(
                    key, f"absent for TYPE '{type_name}'", json_type(value), _join(path, key)
                )
            self._unknown(key, path)

        label = _optional(obj, "LABEL", path, _string)
        with _located(path):
            kind = _KIND_READERS[kind_cls](obj, path)
            return Input(name=name, kind=kind, label=label)

    def _passes(self, raw: Any) -> Tuple[Pass, ...]:
        if raw is None:
            return ()
        if not isinstance(raw, list):
            raise StructuralMismatch("PASSES", "an array", json_type(raw), "PASSES")
        passes = []
        for index, entry in enumerate(raw):
            path = f"PASSES[{index}]"
            obj = _object(entry, "PASSES", path)
            self._check_keys(obj, PASS_KEYS, path)
            passes.append(
                Pass(
                    target=_optional(obj, "TARGET", path, _string),
                    persistent=bool(_optional(obj, "PERSISTENT", path, _boolean)),
                    float=bool(_optional(obj, "FLOAT", path, _boolean)),
                    width=_optional(obj, "WIDTH", path, _text),
                    height=_optional(obj, "HEIGHT", path, _text),
                )
            )
        return tuple(passes)

    def _imported(self, raw: Any) -> Dict[str, ImportedImage]:
        if raw is None:
            return {}
        imported: Dict[str, ImportedImage] = {}
        if isinstance(raw, dict):
            for name, entry in raw.items():
                path = f"IMPORTED.{name}"
                obj = _object(entry, name, path)
                self._check_keys(obj, IMPORT_KEYS, path)
                imported[name] = self._image(obj, path)
            return imported
        if isinstance(raw, list):
            # ISF 1.0 form: [{"NAME": ..., "PATH": ...}, ...]
            for index, entry in enumerate(raw):
                path = f"IMPORTED[{index}]"
                obj = _object(entry, "IMPORTED", path)
                self._check_keys(obj, IMPORT_KEYS | {"NAME"}, path)
                if obj.get("NAME") is None:
                    raise MissingRequiredField("NAME", path)
                name = _string(obj["NAME"], "NAME", _join(path, "NAME"))
                if name in imported:
                    raise SchemaError(f"duplicate imported image '{name}'", path)
                imported[name] = self._image(obj, path)
            return imported
        raise StructuralMismatch("IMPORTED", "an object", json_type(raw), "IMPORTED")

    @staticmethod
    def _image(obj: Dict[str, Any], path: str) -> ImportedImage:
        if obj.get("PATH") is None:
            raise MissingRequiredField("PATH", path)
        return ImportedImage(path=_string(obj["PATH"], "PATH", _join(path, "PATH")))

    def _persistent_buffers(self, raw: Any) -> Dict[str, PersistentBuffer]:
        if raw is None:
            return {}
        if isinstance(raw, list):
            # ISF 1.0 form: a plain list of buffer names.
            names = _array(raw, "PERSISTENT_BUFFERS", "PERSISTENT_BUFFERS", _string)
            return {name: PersistentBuffer() for name in names}
        if not isinstance(raw, dict):
            raise StructuralMismatch("PERSISTENT_BUFFERS", "an object", json_type(raw), "PERSISTENT_BUFFERS")
        buffers: Dict[str, PersistentBuffer] = {}
        for name, entry in raw.items():
            path = f"PERSISTENT_BUFFERS.{name}"
            obj = _object(entry if entry is not None else {}, name, path)
            self._check_keys(obj, BUFFER_KEYS, path)
            buffers[name] = PersistentBuffer(
                width=_optional(obj, "WIDTH", path, _text),
                height=_optional(obj, "HEIGHT", path, _text),
                float=bool(_optional(obj, "FLOAT", path, _boolean)),
            )
        return buffers
