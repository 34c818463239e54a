"""Tests covering invariants enforced when building model values directly."""

from dataclasses import FrozenInstanceError, replace

import pytest

from isf import (
    INPUT_KINDS,
    DuplicateInputName,
    ImportedImage,
    Input,
    InputAudio,
    InputBool,
    InputColor,
    InputEvent,
    InputFloat,
    InputImage,
    InputLong,
    InputPoint2D,
    InvalidEnumeration,
    InvalidRange,
    Isf,
    Pass,
    PersistentBuffer,
    SchemaError,
    StructuralMismatch,
)


def test_dispatch_table_covers_every_type() -> None:
    assert sorted(INPUT_KINDS) == sorted(
        ["event", "bool", "long", "float", "point2D", "color", "image", "audio", "audioFFT"]
    )
    for type_name, kind in INPUT_KINDS.items():
        assert kind.TYPE == type_name


def test_duplicate_input_names_rejected() -> None:
    with pytest.raises(DuplicateInputName) as excinfo:
        Isf(inputs=[Input("speed", InputFloat()), Input("speed", InputBool())])

    assert excinfo.value.name == "speed"


def test_replace_revalidates() -> None:
    doc = Isf(inputs=[Input("a", InputEvent())])
    with pytest.raises(DuplicateInputName):
        replace(doc, inputs=doc.inputs + (Input("a", InputImage()),))


def test_float_min_greater_than_max() -> None:
    with pytest.raises(InvalidRange):
        InputFloat(min=10, max=0)


def test_float_default_outside_range() -> None:
    with pytest.raises(InvalidRange):
        InputFloat(default=2.0, min=0.0, max=1.0)


def test_float_default_checked_only_when_bounds_complete() -> None:
    kind = InputFloat(default=5, max=1)
    assert kind.default == 5.0
    assert kind.min is None


def test_float_values_are_normalised() -> None:
    kind = InputFloat(default=1, min=0, max=2)
    assert isinstance(kind.default, float)
    assert kind == InputFloat(default=1.0, min=0.0, max=2.0)


def test_point_range_is_component_wise() -> None:
    InputPoint2D(default=(0.5, 0.5), min=(0, 0), max=(1, 1))
    with pytest.raises(InvalidRange):
        InputPoint2D(min=(0, 2), max=(1, 1))


def test_point_requires_two_components() -> None:
    with pytest.raises(StructuralMismatch):
        InputPoint2D(default=(1.0, 2.0, 3.0))


def test_color_requires_rgba() -> None:
    assert InputColor(default=[1, 0, 0, 1]).default == (1.0, 0.0, 0.0, 1.0)
    with pytest.raises(StructuralMismatch):
        InputColor(default=(1.0, 0.0, 0.0))


def test_long_options_pair_values_with_labels() -> None:
    kind = InputLong(default=1, values=[0, 1, 2], labels=["A", "B", "C"])
    assert kind.options == ((0, "A"), (1, "B"), (2, "C"))


def test_long_options_without_labels() -> None:
    assert InputLong(values=(4, 8)).options == ((4, None), (8, None))


def test_long_values_must_be_distinct() -> None:
    with pytest.raises(InvalidEnumeration):
        InputLong(values=(1, 2, 1))


def test_long_label_count_must_match() -> None:
    with pytest.raises(InvalidEnumeration):
        InputLong(values=(0, 1), labels=("only one",))
    with pytest.raises(InvalidEnumeration):
        InputLong(labels=("orphan",))


def test_invalid_enumeration_is_a_range_error() -> None:
    assert issubclass(InvalidEnumeration, InvalidRange)


def test_audio_count_must_be_non_negative() -> None:
    assert InputAudio(num_samples=64).num_samples == 64
    with pytest.raises(InvalidRange):
        InputAudio(num_samples=-1)


def test_input_name_required() -> None:
    with pytest.raises(SchemaError):
        Input("", InputEvent())


def test_input_type_follows_variant() -> None:
    item = Input("flash", InputEvent(), label="Flash")
    assert item.type == "event"
    assert item.label == "Flash"


def test_values_are_immutable() -> None:
    doc = Isf(imported={"noise": ImportedImage("noise.png")}, passes=[Pass(width=256)])
    with pytest.raises(FrozenInstanceError):
        doc.description = "changed"  # type: ignore[misc]
    with pytest.raises(TypeError):
        doc.imported["other"] = ImportedImage("other.png")  # type: ignore[index]

    assert doc.passes[0].width == "256"


def test_input_named_lookup() -> None:
    doc = Isf(inputs=[Input("a", InputEvent()), Input("b", InputImage())])
    assert doc.input_named("b") == Input("b", InputImage())
    assert doc.input_named("missing") is None


def test_documents_are_hashable() -> None:
    def build() -> Isf:
        return Isf(
            inputs=[Input("tint", InputColor(default=(1, 0, 0, 1)))],
            imported={"noise": ImportedImage("noise.png")},
            persistent_buffers={"trail": PersistentBuffer(float=True)},
        )

    assert hash(build()) == hash(build())
    assert len({build(), build(), Isf()}) == 2
