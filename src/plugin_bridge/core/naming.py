"""
Identifier normalization and per-namespace collision resolution.
"""

import re
from typing import Iterable, Set

FALLBACK_NAME = "item"

# Pre-compiled regex patterns for performance
_RE_PATH_SEP = re.compile(r"[\\/]+")
_RE_COLON_SPACE = re.compile(r"[:\s]+")
_RE_INVALID = re.compile(r"[^a-z0-9_-]+")
_RE_DASH_RUN = re.compile(r"-+")
_RE_SAFE_SKILL = re.compile(r"^[A-Za-z0-9_.-]+$")


def normalize_name(value: str) -> str:
    """Collapse an arbitrary display name into a lowercase, hyphenated identifier."""
    trimmed = value.strip()
    if not trimmed:
        return FALLBACK_NAME

    normalized = trimmed.lower()
    normalized = _RE_PATH_SEP.sub("-", normalized)
    normalized = _RE_COLON_SPACE.sub("-", normalized)
    normalized = _RE_INVALID.sub("-", normalized)
    normalized = _RE_DASH_RUN.sub("-", normalized)
    normalized = normalized.strip("-")
    return normalized or FALLBACK_NAME


def flatten_command_name(name: str) -> str:
    """Drop the namespace of a command ("workflows:plan" -> "plan") and normalize."""
    _, _, base = name.rpartition(":")
    return normalize_name(base)


def is_safe_path_component(name: str) -> bool:
    """Check that a name stays a single entry inside its parent directory."""
    if not name or name in (".", ".."):
        return False
    return ".." not in name and "/" not in name and "\\" not in name


def is_valid_skill_name(name: str) -> bool:
    """
    Stricter check used before linking a skill into a live home directory:
    a safe path component made only of letters, digits, `_`, `.` and `-`.
    """
    return is_safe_path_component(name) and bool(_RE_SAFE_SKILL.match(name))


class NameRegistry:
    """
    Tracks identifiers used in one namespace during one conversion run.

    Pass-through names must be reserved before generated names are resolved,
    so that only generated entities receive a numeric suffix.
    """

    def __init__(self, reserved: Iterable[str] = ()):
        self._used: Set[str] = set(reserved)

    def __contains__(self, name: str) -> bool:
        return name in self._used

    def __len__(self) -> int:
        return len(self._used)

    def reserve(self, name: str) -> str:
        self._used.add(name)
        return name

    def resolve(self, base: str) -> str:
        if base not in self._used:
            return self.reserve(base)

        index = 2
        while f"{base}-{index}" in self._used:
            index += 1
        return self.reserve(f"{base}-{index}")
