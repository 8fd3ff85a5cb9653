"""Compile protection lists and include/exclude patterns into predicates."""

import re
from typing import Callable, Optional

from mergesweep.config import ProtectionSet
from mergesweep.exceptions import ConfigError

Predicate = Callable[[str], bool]

# A lookahead that can never succeed, so it matches no branch name.
NEVER = re.compile(r"(?!)")


def compile_protection(protection: ProtectionSet) -> Predicate:
    """Compile protected names into an exact, whole-name match.

    Names are escaped, so ``release.1`` protects only ``release.1``.
    An empty set matches nothing.
    """
    names = [name for name in protection if name]
    pattern = re.compile("|".join(re.escape(name) for name in names)) if names else NEVER
    return lambda branch: pattern.fullmatch(branch) is not None


def _compile(pattern: str, option: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as err:
        raise ConfigError(f"Invalid {option} pattern {pattern!r}: {err}") from err


def compile_include(pattern: Optional[str]) -> Predicate:
    """Compile the inclusion pattern. Unset matches every branch."""
    compiled = _compile(pattern or "", "--match")
    return lambda branch: compiled.search(branch) is not None


def compile_exclude(pattern: Optional[str]) -> Predicate:
    """Compile the exclusion pattern. Unset matches no branch."""
    compiled = _compile(pattern, "--ignore") if pattern else NEVER
    return lambda branch: compiled.search(branch) is not None
