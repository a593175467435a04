"""Template expansion for step commands and guards.

Templates embed ``{{ name }}`` markers, optionally with a filter:
``{{ name | upper }}``. Expansion is a single left-to-right pass, so
substituted values are never re-scanned for markers.
"""

import json
import re
from collections.abc import Callable, Collection
from typing import Any

from sysflow.core.scope import VariableScope
from sysflow.exceptions import TemplateError

TEMPLATE_PATTERN = re.compile(r"\{\{\s*(\w+)(?:\s*\|\s*(\w+))?\s*\}\}")
IDENTIFIER_PATTERN = re.compile(r"^\w+$")

FALSY_VALUES = frozenset({"", "false", "0"})


def _parse_structured(value: str) -> Any:
    """Return the JSON array/object encoded in value, or None."""
    stripped = value.strip()
    if not stripped.startswith(("[", "{")):
        return None
    try:
        return json.loads(stripped)
    except ValueError:
        return None


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _length(value: str) -> str:
    parsed = _parse_structured(value)
    if isinstance(parsed, (list, dict)):
        return str(len(parsed))
    return str(len(value))


def _first(value: str) -> str:
    parsed = _parse_structured(value)
    if isinstance(parsed, list):
        return _to_text(parsed[0]) if parsed else ""
    return value[:1]


def _last(value: str) -> str:
    parsed = _parse_structured(value)
    if isinstance(parsed, list):
        return _to_text(parsed[-1]) if parsed else ""
    return value[-1:]


def _pretty_json(value: str) -> str:
    parsed = _parse_structured(value)
    if parsed is None:
        return value
    return json.dumps(parsed, indent=2)


FILTERS: dict[str, Callable[[str], str]] = {
    "upper": str.upper,
    "lower": str.lower,
    "trim": str.strip,
    "length": _length,
    "count": _length,
    "first": _first,
    "last": _last,
    "json": _pretty_json,
}


def expand(
    template: str,
    scope: VariableScope,
    strict: bool = False,
    pending: Collection[str] = (),
) -> str:
    """Replace every ``{{ name }}`` marker with its value in scope.

    Unknown variables expand to an empty string. With strict=True they
    raise TemplateError instead, listing every missing name. Names in
    pending are expected but not yet set, and never count as missing.
    """
    missing: list[str] = []

    def replace(match: re.Match[str]) -> str:
        name, filter_name = match.group(1), match.group(2)
        value = scope.get(name)
        if value is None:
            if name not in missing and name not in pending:
                missing.append(name)
            value = ""
        if filter_name:
            apply = FILTERS.get(filter_name)
            if apply is not None:
                value = apply(value)
        return value

    result = TEMPLATE_PATTERN.sub(replace, template)
    if strict and missing:
        raise TemplateError(template, missing)
    return result


def find_references(template: str) -> list[str]:
    """Variable names referenced by a template, in order, without repeats."""
    names: list[str] = []
    for match in TEMPLATE_PATTERN.finditer(template):
        if match.group(1) not in names:
            names.append(match.group(1))
    return names


def find_filters(template: str) -> list[str]:
    """Filter names used by a template, in order, without repeats."""
    names: list[str] = []
    for match in TEMPLATE_PATTERN.finditer(template):
        filter_name = match.group(2)
        if filter_name and filter_name not in names:
            names.append(filter_name)
    return names


def is_identifier(name: str) -> bool:
    """Whether name can be referenced from a template marker."""
    return bool(IDENTIFIER_PATTERN.match(name))


def is_truthy(value: str) -> bool:
    """Decide a ``when`` guard from its expanded value.

    Empty (or whitespace-only), "false" in any case, and "0" are false;
    everything else is true.
    """
    return value.strip().lower() not in FALSY_VALUES
