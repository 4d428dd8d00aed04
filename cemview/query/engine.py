"""Resolve dotted/bracketed path expressions against named data sources.

Supported path syntax::

    modules.0.path                 dotted keys and list indexes
    elements[my-button]            bracket keys, same as elements.my-button
    modules.#                      length of a list
    modules.#.path                 collect ``path`` from every element
    declarations[?name==MyEl]      first element whose ``name`` equals MyEl
    declarations[?@.kind==class]   same, with an explicit ``@`` anchor
    declarations.#(tagName==x-a)   same, in hash-filter form
    elements.$.tag                 ``$.tag`` is replaced from the ``args`` source
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Optional, Sequence

from ..logging import get_logger

_LOGGER = get_logger("query")

ARGS_SOURCE = "args"

_MISSING = object()
_VARIABLE = re.compile(r"\$\.([A-Za-z0-9_]+)")
_BRACKET = re.compile(r"\[([^\]]*)\]")
_SELECTOR = re.compile(r"^\??@?\.?(?P<key>[^=!]+?)\s*(?P<op>==|!=)\s*(?P<value>.*)$")
_HASH_FILTER = re.compile(r"^#\((?P<body>.*)\)$")


class QueryError(LookupError):
    """Base class for path query failures."""


class SourceNotFoundError(QueryError):
    def __init__(self, source: str) -> None:
        super().__init__(f"data source '{source}' not found")
        self.source = source


class PathNotFoundError(QueryError):
    def __init__(self, source: str, path: str) -> None:
        super().__init__(f"path '{path}' not found in source '{source}'")
        self.source = source
        self.path = path


class VariableNotFoundError(QueryError):
    def __init__(self, variable: str) -> None:
        super().__init__(f"variable '{variable}' not found in args")
        self.variable = variable


@dataclass
class DataFetcher:
    """One named lookup; its result becomes a source for later fetchers."""

    name: str
    source: str
    path: str = ""
    filter: str = ""
    required: bool = False


# ----------------------------------------------------------------------
# Path parsing


def rewrite_bracket_keys(path: str) -> str:
    """Rewrite ``a[key]`` to ``a.key`` unless the bracket holds a selector."""

    def _replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        if "?" in key or "@" in key:
            return match.group(0)
        return "." + key

    return _BRACKET.sub(_replace, path)


def substitute_variables(path: str, args: object) -> str:
    """Replace every ``$.name`` in ``path`` with ``args[name]``."""
    if "$." not in path:
        return path
    if not isinstance(args, Mapping):
        raise QueryError("args must be a mapping for variable substitution")

    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name not in args:
            raise VariableNotFoundError(name)
        return _as_text(args[name])

    substituted = _VARIABLE.sub(_replace, path)
    if "$." in substituted:
        raise QueryError(f"invalid variable syntax in path '{path}'")
    return substituted


def split_path(path: str) -> List[str]:
    """Split on dots that are not inside ``[...]`` or ``#(...)``."""
    segments: List[str] = []
    current: List[str] = []
    depth = 0
    for char in path:
        if char in "[(":
            depth += 1
        elif char in "])":
            depth = max(depth - 1, 0)
        if char == "." and depth == 0:
            segments.append("".join(current))
            current = []
            continue
        current.append(char)
    segments.append("".join(current))
    return [segment for segment in segments if segment != ""]


def _as_text(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _matches(item: object, expression: str) -> bool:
    parsed = _SELECTOR.match(expression.strip())
    if parsed is None or not isinstance(item, Mapping):
        return False
    key = parsed.group("key").strip()
    expected = parsed.group("value").strip().strip("'\"")
    actual = _as_text(item[key]) if key in item else None
    equal = actual == expected
    return equal if parsed.group("op") == "==" else not equal


def _select(value: object, expression: str) -> object:
    if not isinstance(value, list):
        return _MISSING
    return next((item for item in value if _matches(item, expression)), _MISSING)


def _step(value: object, segment: str) -> object:
    hash_filter = _HASH_FILTER.match(segment)
    if hash_filter is not None:
        return _select(value, hash_filter.group("body"))

    selectors: List[str] = []
    base = segment
    bracket = base.find("[")
    if bracket != -1 and base.endswith("]"):
        selectors = _BRACKET.findall(base[bracket:])
        base = base[:bracket]

    if base:
        if isinstance(value, Mapping):
            value = value.get(base, _MISSING)
        elif isinstance(value, list) and base.isdigit():
            index = int(base)
            value = value[index] if index < len(value) else _MISSING
        else:
            value = _MISSING
    for selector in selectors:
        if value is _MISSING:
            break
        value = _select(value, selector)
    return value


def _walk(value: object, segments: Sequence[str]) -> object:
    for position, segment in enumerate(segments):
        if value is _MISSING:
            return _MISSING
        if segment == "#":
            if not isinstance(value, list):
                return _MISSING
            rest = segments[position + 1 :]
            if not rest:
                return len(value)
            collected = [_walk(item, rest) for item in value]
            return [item for item in collected if item is not _MISSING]
        value = _step(value, segment)
    return value


# ----------------------------------------------------------------------
# Filters


def _first(value: object) -> object:
    if isinstance(value, list) and value:
        return value[0]
    return value


def _count(value: object) -> int:
    return len(value) if isinstance(value, list) else 1


def _exists(value: object) -> bool:
    return value is not None


_FILTERS = {"first": _first, "count": _count, "exists": _exists}


def apply_filter(value: object, name: str | None) -> object:
    """Apply a post-resolution filter. Unknown names pass ``value`` through."""
    if not name:
        return value
    handler = _FILTERS.get(name)
    if handler is None:
        _LOGGER.debug("Unknown filter %r; returning value unchanged", name)
        return value
    return handler(value)


# ----------------------------------------------------------------------
# Engine


class PathQueryEngine:
    """Stateless resolver for path expressions over named sources."""

    def resolve_path(self, sources: Mapping[str, Any], source: str, path: str) -> Any:
        """Return a copy of the value at ``path``; mutating it leaves ``sources`` intact."""
        if source not in sources:
            raise SourceNotFoundError(source)
        resolved = substitute_variables(path, sources.get(ARGS_SOURCE))
        segments = split_path(resolved)
        value = _walk(sources[source], segments)
        if value is _MISSING:
            rewritten = rewrite_bracket_keys(resolved)
            if rewritten != resolved:
                resolved = rewritten
                value = _walk(sources[source], split_path(rewritten))
        if value is _MISSING:
            raise PathNotFoundError(source, resolved)
        return copy.deepcopy(value)

    def resolve_path_with_filter(
        self,
        sources: Mapping[str, Any],
        source: str,
        path: str,
        filter: str | None = None,
    ) -> Any:
        try:
            value = self.resolve_path(sources, source, path)
        except QueryError:
            if filter == "exists":
                return False
            raise
        return apply_filter(value, filter)

    def apply_filter(self, value: object, name: str | None) -> object:
        return apply_filter(value, name)

    def execute_fetcher(self, fetcher: DataFetcher, sources: Mapping[str, Any]) -> Optional[Any]:
        """Run one fetcher; a failed optional fetcher yields ``None``."""
        if not fetcher.source:
            raise QueryError(f"fetcher '{fetcher.name}' missing required 'source' field")
        try:
            if fetcher.path:
                return self.resolve_path_with_filter(
                    sources, fetcher.source, fetcher.path, fetcher.filter
                )
            if fetcher.source not in sources:
                raise SourceNotFoundError(fetcher.source)
            return apply_filter(copy.deepcopy(sources[fetcher.source]), fetcher.filter)
        except QueryError as exc:
            if fetcher.required:
                raise QueryError(f"required fetcher '{fetcher.name}' failed: {exc}") from exc
            _LOGGER.debug("Skipping optional fetcher %s: %s", fetcher.name, exc)
            return None

    def execute_fetchers(
        self,
        fetchers: Iterable[DataFetcher],
        sources: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """Run ``fetchers`` in order, feeding each result forward as a source."""
        available: MutableMapping[str, Any] = dict(sources)
        results: Dict[str, Any] = {}
        for fetcher in fetchers:
            result = self.execute_fetcher(fetcher, available)
            if result is None:
                continue
            results[fetcher.name] = result
            available[fetcher.name] = result
        return results


__all__ = [
    "ARGS_SOURCE",
    "DataFetcher",
    "PathNotFoundError",
    "PathQueryEngine",
    "QueryError",
    "SourceNotFoundError",
    "VariableNotFoundError",
    "apply_filter",
    "rewrite_bracket_keys",
    "split_path",
    "substitute_variables",
]
