from .registry import TableKey, TerminologyRegistry, get_registry
from .types import EXPLANATIONS, CraftType, Language, TermKey

__all__ = [
    # Enums
    "CraftType",
    "Language",
    "TermKey",
    # Technique -> explanation lookup
    "EXPLANATIONS",
    # Registry
    "TableKey",
    "TerminologyRegistry",
    "get_registry",
]
