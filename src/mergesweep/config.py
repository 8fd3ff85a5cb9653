"""Configuration resolution: scope, run mode, protected branches and merge target."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Union

from mergesweep.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SKIP = "master,main,develop"
DEFAULT_TARGET = "origin/master"

SKIP_KEY = "skip"
TARGET_KEY = "into"

ProtectionSet = tuple[str, ...]


class ConfigStore(Protocol):
    """Read-only key/value lookup for persisted settings."""

    def get(self, key: str) -> Optional[str]: ...


class Mode(Enum):
    """Run mode."""

    DRY_RUN = "dry-run"
    APPLY = "apply"


@dataclass(frozen=True)
class Local:
    """Operate on local branches."""

    def __str__(self) -> str:
        return "local"


@dataclass(frozen=True)
class Remote:
    """Operate on the branches of a named remote."""

    name: str

    def __str__(self) -> str:
        return f"remote {self.name}"


Scope = Union[Local, Remote]


def scope_from_flags(local: bool, remote: Optional[str]) -> Scope:
    """Build a scope from the two command line flags.

    Raises:
        ConfigError: If both or neither are given, or the remote name is blank
    """
    if local and remote is not None:
        raise ConfigError("Use either --local or --remote, not both")
    if local:
        return Local()
    if remote is None:
        raise ConfigError("One of --local or --remote is required")
    if not remote.strip():
        raise ConfigError("--remote requires a remote name")
    return Remote(remote.strip())


def split_names(value: str) -> ProtectionSet:
    """Split a comma-separated list, dropping blank entries."""
    return tuple(name for name in (part.strip() for part in value.split(",")) if name)


def resolve_protection(explicit: Optional[str], store: ConfigStore) -> ProtectionSet:
    """Resolve the branches that must never be deleted.

    An explicit value replaces the persisted or default list entirely,
    even when it is blank.

    Args:
        explicit: Comma-separated names from the command line, or None
        store: Persisted settings, read for the ``skip`` key

    Returns:
        The protected branch names, in the order given
    """
    if explicit is not None:
        source, value = "command line", explicit
    else:
        persisted = store.get(SKIP_KEY)
        if persisted is not None:
            source, value = "config", persisted
        else:
            source, value = "default", DEFAULT_SKIP

    protection = split_names(value)
    logger.debug("Protected branches from %s: %s", source, ", ".join(protection) or "(none)")
    return protection


def resolve_target(explicit: Optional[str], store: ConfigStore) -> str:
    """Resolve the branch used as the merge baseline."""
    if explicit:
        target = explicit
    else:
        target = store.get(TARGET_KEY) or DEFAULT_TARGET
    logger.debug("Merge target: %s", target)
    return target
