"""Verdict aggregation.

Precedence over the (post-exemption) outcomes:
1. Any FAIL -> NOT_CAPABLE (a confirmed failure outranks an unknown)
2. Else any UNDETERMINED -> UNDETERMINED
3. Else -> CAPABLE

FAILED_TO_RUN is produced only by failed_to_run(), when no outcome set exists.
"""

from __future__ import annotations

__all__ = [
    "Verdict",
    "VerdictResult",
    "aggregate",
    "evaluate",
    "failed_to_run",
]

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

from hwready.checks.exemption import EXEMPTION_RULES, ExemptionRule, apply_exemption
from hwready.checks.outcome import CheckOutcome, CheckStatus
from hwready.checks.suite import run_checks
from hwready.constants import DEFAULT_THRESHOLDS, Thresholds
from hwready.facts.models import FactSet

# Reason separator; names are kept in evaluation order
_REASON_SEPARATOR = ", "


class Verdict(IntEnum):
    """Verdict codes written to the run record."""

    CAPABLE = 0
    NOT_CAPABLE = 1
    UNDETERMINED = -1
    FAILED_TO_RUN = -2

    @property
    def label(self) -> str:
        """Human-readable label, e.g. "NOT CAPABLE"."""
        return self.name.replace("_", " ")


@dataclass(frozen=True, slots=True)
class VerdictResult:
    """Aggregated result of one evaluation.

    Attributes:
        verdict: Verdict code.
        outcomes: Per-check outcomes in evaluation order (empty for FAILED_TO_RUN).
        trail: Concatenated trail fragments.
        reason: Comma-separated names of failed/undetermined checks ("" when CAPABLE).
        error: Collection error message for FAILED_TO_RUN.
    """

    verdict: Verdict
    outcomes: tuple[CheckOutcome, ...]
    trail: str
    reason: str
    error: str | None = None

    @property
    def failed_checks(self) -> list[str]:
        return [o.name for o in self.outcomes if o.status is not CheckStatus.PASS]


def aggregate(outcomes: Sequence[CheckOutcome]) -> VerdictResult:
    """Combine per-check outcomes into a single verdict."""
    statuses = {o.status for o in outcomes}
    if CheckStatus.FAIL in statuses:
        verdict = Verdict.NOT_CAPABLE
    elif CheckStatus.UNDETERMINED in statuses:
        verdict = Verdict.UNDETERMINED
    else:
        verdict = Verdict.CAPABLE

    trail = "".join(o.fragment for o in outcomes)
    reason = _REASON_SEPARATOR.join(o.name for o in outcomes if o.status is not CheckStatus.PASS)
    return VerdictResult(verdict=verdict, outcomes=tuple(outcomes), trail=trail, reason=reason)


def failed_to_run(error: str) -> VerdictResult:
    """Verdict for a run where no outcome set could be produced."""
    return VerdictResult(
        verdict=Verdict.FAILED_TO_RUN,
        outcomes=(),
        trail=f"FactCollection: Error={error}. {Verdict.FAILED_TO_RUN.label}; ",
        reason="",
        error=error,
    )


def evaluate(
    facts: FactSet,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
    rules: Sequence[ExemptionRule] = EXEMPTION_RULES,
) -> VerdictResult:
    """Run the checks, apply the exemption policy and aggregate."""
    outcomes = [apply_exemption(outcome, facts, rules) for outcome in run_checks(facts, thresholds)]
    return aggregate(outcomes)
