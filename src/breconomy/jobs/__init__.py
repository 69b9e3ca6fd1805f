"""Background jobs -- per-indicator refresh loops and their scheduler."""

from breconomy.jobs.refresh import CycleOutcome, refresh_once, run_refresh_job
from breconomy.jobs.scheduler import RefreshScheduler

__all__ = ["CycleOutcome", "RefreshScheduler", "refresh_once", "run_refresh_job"]
