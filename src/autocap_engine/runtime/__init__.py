"""Runtime services (telemetry) shared by the correction engine."""

from . import telemetry

__all__ = ["telemetry"]
