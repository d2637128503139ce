"""PromptResolver: two-tier template lookup plus ``{name}`` substitution."""

from __future__ import annotations

import re
from typing import Mapping

from ..prompts.methods import DEFAULT_METHOD_PROMPTS, METHOD_FALLBACKS
from ..types import UnknownMethodKey

PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def merge_overrides(*tables: Mapping[str, str] | None) -> dict[str, str]:
    """Layer override tables left to right; empty values never shadow earlier ones."""
    merged: dict[str, str] = {}
    for table in tables:
        if not table:
            continue
        for key, value in table.items():
            if value:
                merged[str(key)] = value
    return merged


class PromptResolver:
    """Resolve a template by key and fill its placeholders.

    Resolution order per key: a non-empty entry in the caller's override
    table, then the built-in default. Keys outside the default table are
    rejected with ``UnknownMethodKey``.

    Substitution is one left-to-right regex pass. A placeholder takes the
    caller's value when it is non-empty, else its fallback; with neither it
    is left verbatim. Replacement text is never scanned again, so values
    containing ``{...}`` are inserted as-is.
    """

    def __init__(
        self,
        defaults: Mapping[str, str],
        fallbacks: Mapping[str, str] | None = None,
    ) -> None:
        self.defaults = dict(defaults)
        self.fallbacks = dict(fallbacks or {})

    def keys(self) -> list[str]:
        return list(self.defaults)

    def resolve(self, key: str, overrides: Mapping[str, str] | None = None) -> str:
        if key not in self.defaults:
            raise UnknownMethodKey(key, self.keys())
        if overrides:
            custom = overrides.get(key)
            if custom:
                return custom
        return self.defaults[key]

    def substitute(self, template: str, variables: Mapping[str, object] | None = None) -> str:
        values = variables or {}

        def _replace(match: re.Match) -> str:
            name = match.group(1)
            value = values.get(name)
            if value is not None and value != "":
                return str(value)
            if name in self.fallbacks:
                return self.fallbacks[name]
            return match.group(0)

        return PLACEHOLDER_RE.sub(_replace, template)

    def render(
        self,
        key: str,
        overrides: Mapping[str, str] | None = None,
        variables: Mapping[str, object] | None = None,
    ) -> str:
        return self.substitute(self.resolve(key, overrides), variables)

    @staticmethod
    def placeholders(template: str) -> list[str]:
        """Placeholder names in order of first appearance."""
        seen: dict[str, None] = {}
        for match in PLACEHOLDER_RE.finditer(template):
            seen.setdefault(match.group(1), None)
        return list(seen)


def method_resolver() -> PromptResolver:
    """Resolver over the four built-in elicitation method prompts."""
    return PromptResolver(DEFAULT_METHOD_PROMPTS, METHOD_FALLBACKS)
