"""
Thin adapter around :mod:`json`.

The mapper and serializer only deal with the generic tree produced here
(dict / list / str / int / float / bool / None), so the JSON backend can be
swapped without touching validation logic.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from .errors import MalformedJson


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def decode(text: str) -> Any:
    """Decode JSON text into a generic tree."""

    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise MalformedJson(exc.msg, exc.lineno, exc.colno, exc.pos) from exc
    except RecursionError as exc:
        raise MalformedJson("document nested too deeply") from exc
    except ValueError as exc:
        raise MalformedJson(str(exc)) from exc


def encode(tree: Any, indent: Optional[int] = 2) -> str:
    """Encode a generic tree as JSON text."""

    return json.dumps(tree, indent=indent, ensure_ascii=False, allow_nan=False)
