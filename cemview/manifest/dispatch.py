"""Kind-tagged dispatch for manifest exports, declarations and class members."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Type, TypeVar

from ..logging import get_logger
from .errors import ManifestError, UnknownDiscriminatorError

T = TypeVar("T")

Decoder = Callable[[Mapping[str, Any]], T]
KindTable = Mapping[str, Decoder]
Refiner = Callable[[str, Mapping[str, Any]], str]

_LOGGER = get_logger("manifest.dispatch")


def peek_kind(payload: object, *, what: str) -> str:
    """Return the ``kind`` discriminator without touching the rest of ``payload``."""
    if not isinstance(payload, Mapping):
        raise ManifestError(f"Expected a JSON object for {what}, got {type(payload).__name__}")
    kind = payload.get("kind")
    if kind is None:
        return ""
    if not isinstance(kind, str):
        raise ManifestError(f"Expected a string kind for {what}, got {type(kind).__name__}")
    return kind


def dispatch(
    payload: object,
    table: KindTable,
    error: Type[UnknownDiscriminatorError],
    *,
    what: str,
    refine: Optional[Refiner] = None,
) -> Any:
    """Decode ``payload`` with the decoder registered for its kind.

    ``refine`` may map a raw kind onto a more specific table key, e.g. a
    ``class`` flagged ``customElement`` onto the custom element decoder.
    Unknown kinds are rejected, never defaulted.
    """
    kind = peek_kind(payload, what=what)
    key = refine(kind, payload) if refine is not None else kind  # type: ignore[arg-type]
    decoder = table.get(key)
    if decoder is None:
        _LOGGER.debug("Rejecting %s with kind %r", what, kind)
        raise error(kind)
    return decoder(payload)  # type: ignore[arg-type]


__all__ = ["Decoder", "KindTable", "dispatch", "peek_kind"]
