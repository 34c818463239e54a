"""Tests covering configuration profiles, unknown key handling and logging setup."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pydantic
import pytest

import isf
from isf import IsfConfig, UnknownField
from isf.utils.logging import configure_logging

UNKNOWN_KEYS = (
    '/*{"GLSL_VERSION": "120", '
    '"INPUTS": [{"NAME": "amt", "TYPE": "float", "UI_HINT": "slider"}], '
    '"PASSES": [{"DESCRIPTION": "blur"}]}*/'
)


def test_default_config() -> None:
    config = IsfConfig()

    assert config.profile == "default"
    assert config.unknown_keys == "warn"
    assert config.empty_sections == "preserve"
    assert config.indent == 2


def test_config_is_frozen_and_strict() -> None:
    config = IsfConfig()
    with pytest.raises(pydantic.ValidationError):
        config.indent = 4  # type: ignore[misc]
    with pytest.raises(pydantic.ValidationError):
        IsfConfig(unknown_keys="explode")
    with pytest.raises(pydantic.ValidationError):
        IsfConfig(indent=-1)
    with pytest.raises(pydantic.ValidationError):
        IsfConfig(colour=True)


def test_blank_profile_name_normalised() -> None:
    assert IsfConfig(profile="  ").profile == "default"


@pytest.mark.parametrize(
    "name, unknown_keys, empty_sections, indent",
    [
        ("default", "warn", "preserve", 2),
        ("strict", "error", "preserve", 2),
        ("compact", "ignore", "omit", None),
    ],
)
def test_bundled_profiles(name: str, unknown_keys: str, empty_sections: str, indent) -> None:
    config = IsfConfig.from_profile(name)

    assert config.profile == name
    assert config.unknown_keys == unknown_keys
    assert config.empty_sections == empty_sections
    assert config.indent == indent


def test_profile_from_custom_file(tmp_path: Path) -> None:
    profiles = tmp_path / "profiles.yaml"
    profiles.write_text("studio:\n  unknown_keys: ignore\n  indent: 4\nbare:\n", encoding="utf-8")

    studio = IsfConfig.from_profile("studio", path=profiles)
    assert studio.unknown_keys == "ignore"
    assert studio.indent == 4
    assert IsfConfig.from_profile("bare", path=profiles) == IsfConfig(profile="bare")


def test_unknown_profile() -> None:
    with pytest.raises(KeyError):
        IsfConfig.from_profile("does-not-exist")


def test_unknown_keys_warn(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="isf.mapper"):
        doc = isf.parse(UNKNOWN_KEYS)

    assert doc.inputs[0].name == "amt"
    messages = [record.getMessage() for record in caplog.records]
    assert any("GLSL_VERSION" in message for message in messages)
    assert any("INPUTS[0].UI_HINT" in message for message in messages)
    assert any("PASSES[0].DESCRIPTION" in message for message in messages)


def test_unknown_keys_ignore(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="isf.mapper"):
        isf.parse(UNKNOWN_KEYS, IsfConfig(unknown_keys="ignore"))

    assert not caplog.records


def test_unknown_keys_error() -> None:
    with pytest.raises(UnknownField) as excinfo:
        isf.parse(UNKNOWN_KEYS, IsfConfig.from_profile("strict"))

    assert excinfo.value.field == "GLSL_VERSION"


def test_unknown_keys_do_not_reach_the_model() -> None:
    doc = isf.parse(UNKNOWN_KEYS, IsfConfig(unknown_keys="ignore"))
    tree = isf.serialize(doc)

    assert tree == {"INPUTS": [{"NAME": "amt", "TYPE": "float"}], "PASSES": [{}]}
    assert isf.from_tree(tree) == doc


def test_configure_logging_attaches_one_handler() -> None:
    stream = io.StringIO()
    logger = logging.getLogger("isf")
    try:
        configured = configure_logging(level=logging.WARNING, format="%(levelname)s %(message)s", stream=stream)
        assert configured is logger
        assert len(logger.handlers) == 1

        configure_logging(level=logging.WARNING, stream=io.StringIO())
        assert len(logger.handlers) == 1

        isf.parse('/*{"EXTRA": 1}*/')
        assert stream.getvalue() == "WARNING Ignoring unknown ISF key 'EXTRA'\n"
    finally:
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


def test_strict_rejects_null_unknown_input_key() -> None:
    text = '/*{"INPUTS": [{"NAME": "amt", "TYPE": "float", "UI_HINT": null}]}*/'
    with pytest.raises(UnknownField) as excinfo:
        isf.parse(text, IsfConfig.from_profile("strict"))

    assert excinfo.value.path == "INPUTS[0].UI_HINT"


def test_null_known_input_key_is_absent() -> None:
    text = '/*{"INPUTS": [{"NAME": "img", "TYPE": "image", "DEFAULT": null}]}*/'
    doc = isf.parse(text, IsfConfig.from_profile("strict"))

    assert doc.inputs[0].type == "image"
