"""Fact collection: raw host attributes, no policy.

This package provides:
- FactSet / CpuFacts: immutable snapshot models
- collect_facts: normalize a FactSource's raw output into a FactSet
- WindowsFactSource: PowerShell/CIM probe for Windows hosts
- StaticFactSource: replay a raw mapping from JSON
"""

from hwready.facts.collector import FactSource, collect_facts, normalize_facts, parse_cpu_caption
from hwready.facts.models import CpuFacts, FactSet
from hwready.facts.static import StaticFactSource
from hwready.facts.windows import WindowsFactSource

__all__ = [
    "CpuFacts",
    "FactSet",
    "FactSource",
    "StaticFactSource",
    "WindowsFactSource",
    "collect_facts",
    "normalize_facts",
    "parse_cpu_caption",
]
