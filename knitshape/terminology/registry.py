"""
Terminology registry: loads the craft/language term tables from YAML at
startup, validates them, and exposes a read-only query API.

The registry is a module-level singleton; call get_registry() to obtain it.
All tables are loaded and validated once at import time. Nothing writes to
the registry after startup.

──────────────────────────────────────────────────────────────────────────────
Table layout
──────────────────────────────────────────────────────────────────────────────
terminology.yaml has two levels:

    languages.<language>.<term_key>          craft-neutral phrasing
    crafts.<craft>.<language>.<term_key>     techniques and craft sentences

Each (CraftType, Language) table is the merge of its language level and its
craft level. A key may be defined at one level only, and the merged table
must define exactly the TermKey members. A new craft or language is
therefore a data addition that fails loudly at startup until it is complete.
──────────────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any, NamedTuple, cast

import yaml

from .types import CraftType, Language, TermKey

_DATA_DIR = Path(__file__).parent / "data"
_TERMINOLOGY_FILE = "terminology.yaml"


class TableKey(NamedTuple):
    craft: CraftType
    language: Language


class TerminologyRegistry:
    """
    Read-only registry of rendering terminology.

    ``tables`` maps every (craft, language) pair to an immutable TermKey ->
    template mapping.

    Instantiate directly to use a custom data directory (e.g. in tests);
    otherwise use get_registry() for the module singleton.
    """

    def __init__(self, data_dir: Path = _DATA_DIR) -> None:
        self._data_dir = data_dir

        # Type annotation only; actual assignment happens in _load_all
        self.tables: MappingProxyType[TableKey, MappingProxyType[TermKey, str]]

        self._load_all()
        self._validate_tables()

    # ── Loading ────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self._data_dir / filename
        try:
            with open(path, encoding="utf-8") as f:
                return cast(dict[str, Any], yaml.safe_load(f))
        except FileNotFoundError:
            raise FileNotFoundError(f"Terminology data file not found: {path}") from None
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse terminology data file {path}: {exc}") from exc

    def _load_all(self) -> None:
        data = self._load_yaml(_TERMINOLOGY_FILE) or {}
        self._raw_languages: dict[str, dict[str, Any]] = data.get("languages") or {}
        self._raw_crafts: dict[str, dict[str, Any]] = data.get("crafts") or {}

        tables: dict[TableKey, MappingProxyType[TermKey, str]] = {}
        for craft in CraftType:
            for language in Language:
                merged = self._merge(craft, language)
                tables[TableKey(craft, language)] = MappingProxyType(merged)
        self.tables = MappingProxyType(tables)

    def _merge(self, craft: CraftType, language: Language) -> dict[TermKey, str]:
        """Merge the language level and craft level; unknown names are skipped here
        and reported by validation."""
        language_terms = self._raw_languages.get(language.value) or {}
        craft_terms = (self._raw_crafts.get(craft.value) or {}).get(language.value) or {}
        known = {k.value for k in TermKey}
        merged: dict[TermKey, str] = {}
        for source in (language_terms, craft_terms):
            for name, text in source.items():
                if name in known:
                    merged[TermKey(name)] = str(text)
        return merged

    # ── Validation ─────────────────────────────────────────────────────────────

    def _validate_tables(self) -> None:
        """
        Run at startup. Raises ValueError listing all problems found if any
        (craft, language) pair is missing, incomplete, defines a key twice, or
        names a key that is not a TermKey.
        """
        errors: list[str] = []
        self._check_pairs_present(errors)
        self._check_unknown_and_duplicate_keys(errors)
        self._check_completeness(errors)
        if errors:
            raise ValueError(
                "Terminology registry validation failed:\n"
                + "\n".join(f"  • {e}" for e in errors)
            )

    def _check_pairs_present(self, errors: list[str]) -> None:
        for language in Language:
            if language.value not in self._raw_languages:
                errors.append(f"language {language.value!r}: no 'languages' section")
        for craft in CraftType:
            craft_section = self._raw_crafts.get(craft.value)
            if not craft_section:
                errors.append(f"craft {craft.value!r}: no 'crafts' section")
                continue
            for language in Language:
                if language.value not in craft_section:
                    errors.append(f"craft {craft.value!r}: no table for language {language.value!r}")

    def _check_unknown_and_duplicate_keys(self, errors: list[str]) -> None:
        known = {k.value for k in TermKey}
        for lang_name, terms in self._raw_languages.items():
            for name in (terms or {}):
                if name not in known:
                    errors.append(f"languages.{lang_name}: unknown term key {name!r}")
        for craft_name, by_language in self._raw_crafts.items():
            for lang_name, terms in (by_language or {}).items():
                language_terms = self._raw_languages.get(lang_name) or {}
                for name in (terms or {}):
                    if name not in known:
                        errors.append(f"crafts.{craft_name}.{lang_name}: unknown term key {name!r}")
                    elif name in language_terms:
                        errors.append(
                            f"crafts.{craft_name}.{lang_name}: {name!r} is already defined "
                            f"at the language level"
                        )

    def _check_completeness(self, errors: list[str]) -> None:
        """Every pair must define every TermKey."""
        for key, table in self.tables.items():
            missing = [k.value for k in TermKey if k not in table]
            if missing:
                errors.append(
                    f"table ({key.craft.value}, {key.language.value}): missing "
                    + ", ".join(missing)
                )

    # ── Query API ──────────────────────────────────────────────────────────────

    def table(self, craft: CraftType, language: Language) -> MappingProxyType[TermKey, str]:
        """Return the merged term table for a craft and language.

        Raises KeyError for an unsupported pair.
        """
        try:
            return self.tables[TableKey(CraftType(craft), Language(language))]
        except (KeyError, ValueError):
            raise KeyError(
                f"No terminology table for craft {craft!r} and language {language!r}"
            ) from None

    def term(self, craft: CraftType, language: Language, key: TermKey) -> str:
        """Return the raw template text for one key."""
        return self.table(craft, language)[key]

    def format(self, craft: CraftType, language: Language, key: TermKey, **values: Any) -> str:
        """Return the template for *key* with *values* substituted."""
        return self.term(craft, language, key).format(**values)


# ── Module-level singleton ─────────────────────────────────────────────────────
#
# Initialized eagerly at import time so there is no lazy-init race condition
# when renders run concurrently. The registry is read-only after
# construction, so sharing it across threads is safe.

_registry: TerminologyRegistry = TerminologyRegistry()


def get_registry() -> TerminologyRegistry:
    """Return the module-level registry singleton."""
    return _registry
