"""Per-check outcome model and trail fragment formatting."""

from __future__ import annotations

__all__ = [
    "CheckOutcome",
    "CheckStatus",
    "format_fragment",
]

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class CheckStatus(str, Enum):
    """Result of a single check."""

    PASS = "PASS"
    FAIL = "FAIL"
    UNDETERMINED = "UNDETERMINED"


def format_fragment(
    check_name: str,
    fields: Sequence[tuple[str, Any, str]],
    status: CheckStatus,
) -> str:
    """Format a trail fragment: `<CheckName>: <key>=<value>[<unit>]. <STATUS>; `.

    Args:
        check_name: Name of the check (e.g. "Storage").
        fields: (key, value, unit) triples; unit may be empty. A None value is
            rendered as "Undetermined".
        status: Final status token.

    Returns:
        Fragment string, e.g. "Storage: OSDiskSize=120GB. PASS; ".
    """
    rendered = ", ".join(
        f"{key}={'Undetermined' if value is None else value}{'' if value is None else unit}"
        for key, value, unit in fields
    )
    return f"{check_name}: {rendered}. {status.value}; "


@dataclass(frozen=True, slots=True)
class CheckOutcome:
    """Outcome of one check for one run.

    Attributes:
        name: Check name (one of constants.CHECK_ORDER).
        status: PASS, FAIL or UNDETERMINED.
        fragment: Human-readable trail fragment.
        values: Structured values observed by the check (copied into the run record).
        exemption: Identity of the exemption applied, if any.
    """

    name: str
    status: CheckStatus
    fragment: str
    values: dict[str, Any] = field(default_factory=dict)
    exemption: str | None = None

    @property
    def passed(self) -> bool:
        return self.status is CheckStatus.PASS

    def with_exemption(self, exemption: str) -> "CheckOutcome":
        """Return a PASS copy of this outcome annotated with the exemption applied."""
        annotated = self.fragment.removesuffix(f". {self.status.value}; ")
        fragment = f"{annotated}, Exemption={exemption}. {CheckStatus.PASS.value}; "
        return replace(
            self,
            status=CheckStatus.PASS,
            fragment=fragment,
            values={**self.values, "exemption": exemption},
            exemption=exemption,
        )
