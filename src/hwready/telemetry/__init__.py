"""Operational logging for hwready.

Import directly from submodules:
    from hwready.telemetry.system_logger import get_system_logger
"""

__all__: list[str] = []  # Direct submodule imports required (see docstring)
