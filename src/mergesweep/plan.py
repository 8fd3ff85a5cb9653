"""Select the branches to delete and build the deletion plan."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from mergesweep.config import Mode, ProtectionSet, Scope
from mergesweep.exceptions import NoCandidatesError
from mergesweep.patterns import Predicate, compile_exclude, compile_include, compile_protection

logger = logging.getLogger(__name__)


class StageAction(Enum):
    """What a filter stage does with the branches its predicate matches."""

    EXCLUDE = "exclude"
    REQUIRE = "require"


@dataclass(frozen=True)
class Stage:
    """One step of the filter pipeline."""

    name: str
    action: StageAction
    predicate: Predicate

    def apply(self, branches: Sequence[str]) -> list[str]:
        """Run the stage, keeping input order."""
        if self.action is StageAction.REQUIRE:
            return [branch for branch in branches if self.predicate(branch)]
        return [branch for branch in branches if not self.predicate(branch)]


@dataclass(frozen=True)
class FilterSpec:
    """Protection list plus optional include and exclude patterns.

    Patterns are compiled on construction, so an invalid one raises
    ``ConfigError`` before any branch is looked at.
    """

    protection: ProtectionSet = ()
    include: Optional[str] = None
    exclude: Optional[str] = None
    stages: tuple[Stage, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Protection runs first so it wins over a matching include pattern.
        stages = (
            Stage("protected", StageAction.EXCLUDE, compile_protection(self.protection)),
            Stage("match", StageAction.REQUIRE, compile_include(self.include)),
            Stage("ignore", StageAction.EXCLUDE, compile_exclude(self.exclude)),
        )
        object.__setattr__(self, "stages", stages)


def filter_candidates(candidates: Sequence[str], spec: FilterSpec) -> list[str]:
    """Return the candidates that survive every stage of ``spec``, in input order."""
    branches = list(candidates)
    for stage in spec.stages:
        kept = stage.apply(branches)
        if logger.isEnabledFor(logging.DEBUG) and len(kept) < len(branches):
            survivors = set(kept)
            dropped = [branch for branch in branches if branch not in survivors]
            logger.debug("Stage %s dropped: %s", stage.name, ", ".join(dropped))
        branches = kept
    return branches


@dataclass(frozen=True)
class Plan:
    """The branches to delete. Built once, never modified."""

    scope: Scope
    mode: Mode
    selected: tuple[str, ...]
    skipped: ProtectionSet

    @property
    def dry_run(self) -> bool:
        """Whether the plan is only reported, not executed."""
        return self.mode is Mode.DRY_RUN


def build_plan(candidates: Sequence[str], spec: FilterSpec, scope: Scope, mode: Mode) -> Plan:
    """Filter the candidates and wrap the result in a plan.

    Raises:
        NoCandidatesError: If nothing is left to delete
    """
    selected = filter_candidates(candidates, spec)
    if not selected:
        raise NoCandidatesError(f"No merged branches to delete ({scope})")
    logger.debug("Selected %d of %d candidate(s)", len(selected), len(candidates))
    return Plan(scope=scope, mode=mode, selected=tuple(selected), skipped=spec.protection)
