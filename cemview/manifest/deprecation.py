"""Tri-state ``deprecated`` field codec shared by every manifest entity."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping, Optional, Union

from .errors import InvalidDeprecatedShapeError


@dataclass(frozen=True)
class DeprecatedFlag:
    """``"deprecated": true`` or ``"deprecated": false``."""

    value: bool


@dataclass(frozen=True)
class DeprecatedReason:
    """``"deprecated": "use something else"``."""

    reason: str


Deprecated = Optional[Union[DeprecatedFlag, DeprecatedReason]]

_KEY = "deprecated"


def decode_deprecated(payload: Mapping[str, Any], *, owner: str | None = None) -> Deprecated:
    """Decode the ``deprecated`` key of a raw JSON object.

    Absent and ``null`` both decode to ``None``. Booleans decode to
    :class:`DeprecatedFlag` and strings to :class:`DeprecatedReason`. Numbers,
    objects and arrays raise :class:`InvalidDeprecatedShapeError` with the
    offending JSON text attached.
    """
    raw = payload.get(_KEY)
    if raw is None:
        return None
    # bool must be checked before anything numeric: bool is an int subclass
    if isinstance(raw, bool):
        return DeprecatedFlag(raw)
    if isinstance(raw, str):
        return DeprecatedReason(raw)
    raise InvalidDeprecatedShapeError(json.dumps(raw), owner=owner)


def encode_deprecated(value: Deprecated, target: MutableMapping[str, Any]) -> None:
    """Write ``value`` back into ``target`` in the shape it was decoded from."""
    if value is None:
        return
    if isinstance(value, DeprecatedFlag):
        target[_KEY] = value.value
    else:
        target[_KEY] = value.reason


def is_deprecated(value: Deprecated) -> bool:
    """True for ``DeprecatedFlag(True)`` and any reason; false otherwise."""
    if isinstance(value, DeprecatedReason):
        return True
    if isinstance(value, DeprecatedFlag):
        return value.value
    return False


def deprecation_reason(value: Deprecated) -> str:
    if isinstance(value, DeprecatedReason):
        return value.reason
    return ""


__all__ = [
    "Deprecated",
    "DeprecatedFlag",
    "DeprecatedReason",
    "decode_deprecated",
    "deprecation_reason",
    "encode_deprecated",
    "is_deprecated",
]
