"""Eligibility checks, exemption policy and verdict aggregation.

Usage:
    result = evaluate(facts)
    if result.verdict is Verdict.CAPABLE:
        ...
"""

from hwready.checks.exemption import EXEMPTION_RULES, ExemptionRule, apply_exemption
from hwready.checks.outcome import CheckOutcome, CheckStatus
from hwready.checks.suite import run_checks
from hwready.checks.verdict import Verdict, VerdictResult, aggregate, evaluate, failed_to_run

__all__ = [
    "EXEMPTION_RULES",
    "CheckOutcome",
    "CheckStatus",
    "ExemptionRule",
    "Verdict",
    "VerdictResult",
    "aggregate",
    "apply_exemption",
    "evaluate",
    "failed_to_run",
    "run_checks",
]
