"""Processor exemption table.

A closed, static override for one borderline processor: a Processor FAIL is
upgraded to PASS when the CPU matches the restricted identity and the device's
system family is on that identity's allow-list. No other check is eligible,
and this is not an extension point.
"""

from __future__ import annotations

__all__ = [
    "EXEMPTION_RULES",
    "ExemptionRule",
    "apply_exemption",
    "find_exemption",
]

from collections.abc import Sequence
from dataclasses import dataclass

from hwready.checks.outcome import CheckOutcome, CheckStatus
from hwready.constants import CHECK_PROCESSOR
from hwready.facts.models import FactSet
from hwready.telemetry.system_logger import get_system_logger


@dataclass(frozen=True, slots=True)
class ExemptionRule:
    """Restricted CPU identity and the system families permitted to use it.

    Attributes:
        cpu_identity: Display name of the restricted processor.
        cpu_token: Case-insensitive token matched against the CPU name/caption.
        permitted_families: System families (case-insensitive) allowed to pass.
    """

    cpu_identity: str
    cpu_token: str
    permitted_families: frozenset[str]

    def matches_cpu(self, facts: FactSet) -> bool:
        if facts.cpu is None:
            return False
        token = self.cpu_token.lower()
        return any(token in (text or "").lower() for text in (facts.cpu.name, facts.cpu.caption))

    def permits(self, system_family: str | None) -> bool:
        if system_family is None:
            return False
        wanted = system_family.strip().lower()
        return any(wanted == family.lower() for family in self.permitted_families)


EXEMPTION_RULES: tuple[ExemptionRule, ...] = (
    ExemptionRule(
        cpu_identity="Intel Core i7-7820HQ",
        cpu_token="i7-7820HQ",
        permitted_families=frozenset({"Surface Studio 2", "Precision 5520"}),
    ),
)


def find_exemption(facts: FactSet, rules: Sequence[ExemptionRule] = EXEMPTION_RULES) -> str | None:
    """Return the exemption label for this device, or None if no rule permits it."""
    for rule in rules:
        if rule.matches_cpu(facts) and rule.permits(facts.system_family):
            return f"{rule.cpu_identity}@{facts.system_family}"
    return None


def apply_exemption(
    outcome: CheckOutcome,
    facts: FactSet,
    rules: Sequence[ExemptionRule] = EXEMPTION_RULES,
) -> CheckOutcome:
    """Upgrade a Processor FAIL to PASS when an exemption rule permits it.

    Any other outcome (other checks, PASS, UNDETERMINED) is returned unchanged.
    """
    if outcome.name != CHECK_PROCESSOR or outcome.status is not CheckStatus.FAIL:
        return outcome

    exemption = find_exemption(facts, rules)
    if exemption is None:
        return outcome

    get_system_logger().info(
        {
            "event": "exemption_applied",
            "message": f"Processor FAIL overridden by exemption {exemption}",
            "exemption": exemption,
        }
    )
    return outcome.with_exemption(exemption)
