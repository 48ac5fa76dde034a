"""Exception hierarchy for the replication engine.

Every failure raised by :func:`replicate` / :func:`replicate_parallel` is a
:class:`BootstrapError`. The three concrete classes let callers tell apart
bad inputs (rejected before any resampling), a statistic that cannot be
evaluated on some resample, and a worker that died for reasons unrelated to
the statistic.

The exceptions implement ``__reduce__`` so that their context survives the
round trip through a worker process.
"""

from __future__ import annotations

__all__ = [
    "BootstrapError",
    "InvalidInputError",
    "StatisticFailure",
    "WorkerFailure",
    "ReplicationTimeout",
]


class BootstrapError(Exception):
    """Base class for all engine failures."""


class InvalidInputError(BootstrapError, ValueError):
    """Raised when the sample, replicate count or run options are invalid."""


class StatisticFailure(BootstrapError):
    """The statistic raised, or returned a non-finite/non-scalar value."""

    def __init__(
        self,
        message: str,
        *,
        resample_index: int | None = None,
        worker_id: int | None = None,
    ) -> None:
        super().__init__(message)
        self.resample_index = resample_index
        self.worker_id = worker_id

    def __reduce__(self):
        return (
            _rebuild_statistic_failure,
            (self.args[0], self.resample_index, self.worker_id),
        )

    def __str__(self) -> str:
        message = str(self.args[0]) if self.args else ""
        context = []
        if self.worker_id is not None:
            context.append(f"worker={self.worker_id}")
        if self.resample_index is not None:
            context.append(f"resample={self.resample_index}")
        if context:
            return f"{message} ({', '.join(context)})"
        return message


class WorkerFailure(BootstrapError):
    """A parallel worker terminated abnormally (crash, broken pool, pickling)."""

    def __init__(self, message: str, *, worker_id: int | None = None) -> None:
        super().__init__(message)
        self.worker_id = worker_id

    def __reduce__(self):
        return (self.__class__, (self.args[0],), {"worker_id": self.worker_id})


class ReplicationTimeout(WorkerFailure):
    """The optional deadline on a parallel run expired."""


def _rebuild_statistic_failure(
    message: str, resample_index: int | None, worker_id: int | None
) -> StatisticFailure:
    return StatisticFailure(
        message, resample_index=resample_index, worker_id=worker_id
    )
