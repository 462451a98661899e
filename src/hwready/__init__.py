"""hwready: run-once hardware eligibility checker.

Evaluates a fixed set of hardware/firmware checks once per device, combines
them into a single verdict and delivers the resulting run record to a central
destination, queueing locally while the destination is unreachable.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
