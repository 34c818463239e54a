"""
Parser/serializer configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_DIR = Path(__file__).resolve().parent / "configs"
PROFILES_PATH = CONFIG_DIR / "profiles.yaml"

UnknownKeyPolicy = Literal["ignore", "warn", "error"]
EmptySectionPolicy = Literal["preserve", "omit", "always"]


class IsfConfig(BaseModel):
    """
    Knobs for the places where ISF documents are ambiguous.

    ``unknown_keys`` controls keys the schema does not know about;
    ``empty_sections`` controls whether empty ``INPUTS``/``PASSES``/... are
    written back (``preserve`` writes them only when the source had them).
    """

    profile: str = "default"
    unknown_keys: UnknownKeyPolicy = "warn"
    empty_sections: EmptySectionPolicy = "preserve"
    indent: Optional[int] = Field(default=2, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("profile", mode="before")
    @classmethod
    def _normalise_profile(cls, value: object) -> str:
        result = str(value or "").strip()
        return result or "default"

    @classmethod
    def from_profile(cls, name: str = "default", path: Optional[Path] = None) -> "IsfConfig":
        """
        Load a named profile from ``profiles.yaml``.

        Raises ``KeyError`` when the profile is not defined.
        """

        profiles_path = Path(path) if path is not None else PROFILES_PATH
        with profiles_path.open("r", encoding="utf-8") as handle:
            profiles = yaml.safe_load(handle) or {}
        if name not in profiles:
            raise KeyError(f"Profile '{name}' not defined in {profiles_path}")
        return cls(profile=name, **(profiles[name] or {}))


DEFAULT_CONFIG = IsfConfig()
