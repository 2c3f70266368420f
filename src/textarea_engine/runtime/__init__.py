"""Runtime services (telemetry) shared by every subsystem."""

from . import telemetry

__all__ = ["telemetry"]
