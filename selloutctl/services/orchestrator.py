"""Upload orchestrator: the state machine behind a bulk spreadsheet import.

    IDLE -> UPLOADING -> {SUCCEEDED | PARTIALLY_FAILED | CANCELLED | FAILED} -> IDLE

Only one job runs at a time; ``start()`` while uploading is rejected with
``UploadInProgressError``. Completed uploads (including partial failures)
trigger one dataset reload; cancelled and failed ones do not. The reporter
receives exactly one ``report()`` per terminal transition.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Protocol

from pydantic import ValidationError as PayloadValidationError

from selloutctl.core.cancellation import CancelToken
from selloutctl.core.exceptions import (
    MalformedResponseError,
    SelloutCtlError,
    TransportError,
    UploadCancelledError,
    UploadInProgressError,
    ValidationError,
)
from selloutctl.core.logging import AuditLogger, get_audit_logger
from selloutctl.core.validation import validate_upload_file
from selloutctl.models.progress import DurationEstimate, TimerState
from selloutctl.models.upload import (
    FileDescriptor,
    ServerResult,
    UploadJob,
    UploadOutcome,
    UploadStatus,
)
from selloutctl.services.estimator import estimate_duration
from selloutctl.services.timers import UploadTimers

logger = logging.getLogger(__name__)

ReloadCallback = Callable[[], Awaitable[Any]]


class Transport(Protocol):
    """What the orchestrator needs from an upload transport."""

    async def send(self, file: FileDescriptor, cancel_token: CancelToken) -> dict[str, Any]: ...


class ResultReporter:
    """Presentation boundary for upload lifecycle events.

    The default implementation ignores everything; UIs override what they show.
    """

    def upload_started(self, job: UploadJob) -> None:
        """A job entered UPLOADING; show a persistent in-progress notice."""

    def progress(self, state: TimerState) -> None:
        """The clocks ticked."""

    def report(self, outcome: UploadOutcome) -> None:
        """A job settled; replace the in-progress notice with the outcome."""


def parse_server_result(payload: dict[str, Any]) -> ServerResult:
    """Validate the upload endpoint's JSON report.

    Raises:
        MalformedResponseError: If the payload does not fit the report shape.
    """
    try:
        return ServerResult.model_validate(payload)
    except PayloadValidationError as e:
        raise MalformedResponseError(f"unexpected report shape ({e.error_count()} errors)") from e


class UploadOrchestrator:
    """Runs one spreadsheet upload at a time and classifies its outcome."""

    def __init__(
        self,
        transport: Transport,
        *,
        reload: Optional[ReloadCallback] = None,
        reporter: Optional[ResultReporter] = None,
        timers: Optional[UploadTimers] = None,
        estimator: Callable[[int], DurationEstimate] = estimate_duration,
        audit: Optional[AuditLogger] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            transport: Sends the file and honours the job's cancel token.
            reload: Awaited once after every completed upload.
            reporter: Receives lifecycle notifications.
            timers: Remaining/elapsed clocks (owned by the orchestrator).
            estimator: Maps file size to a duration estimate.
            audit: Audit trail for terminal outcomes.
        """
        self._transport = transport
        self._reload = reload
        self.reporter = reporter or ResultReporter()
        self.timers = timers or UploadTimers()
        self.timers.on_tick = self.reporter.progress
        self._estimator = estimator
        self._audit = audit or get_audit_logger()
        self._status = UploadStatus.IDLE
        self._job: Optional[UploadJob] = None
        self._outcome: Optional[UploadOutcome] = None

    # =========================================================================
    # State
    # =========================================================================

    @property
    def status(self) -> UploadStatus:
        """Current lifecycle state."""
        return self._status

    @property
    def job(self) -> Optional[UploadJob]:
        """Active or most recently settled job."""
        return self._job

    @property
    def outcome(self) -> Optional[UploadOutcome]:
        """Outcome of the last settled job, until reset."""
        return self._outcome

    @property
    def timer_state(self) -> TimerState:
        """Remaining/elapsed clocks of the current job."""
        return self.timers.state

    # =========================================================================
    # Commands
    # =========================================================================

    async def start(self, file: FileDescriptor | Path | str | None) -> UploadOutcome:
        """Upload a spreadsheet and wait for it to settle.

        Args:
            file: Descriptor or path of an ``.xlsx``/``.xls`` file.

        Returns:
            The terminal outcome (also passed to the reporter).

        Raises:
            UploadInProgressError: If another upload is running.
            ValidationError: If no file is given or its type is not accepted;
                the transport is never invoked and the state stays IDLE.
        """
        if self._status is UploadStatus.UPLOADING and self._job is not None:
            raise UploadInProgressError(self._job.file.name)
        if self._status.is_terminal:
            self.reset()

        try:
            descriptor = validate_upload_file(file)
        except ValidationError as e:
            logger.warning("Upload rejected: %s", e)
            raise

        estimate = self._estimator(descriptor.size_bytes)
        job = UploadJob(file=descriptor, estimate=estimate, cancel_token=CancelToken())
        self._job = job
        self._status = UploadStatus.UPLOADING
        self.timers.start(estimate)
        logger.info(
            "Uploading %s (%d bytes, estimate %dms)",
            descriptor.name,
            descriptor.size_bytes,
            estimate.total_ms,
        )
        self.reporter.upload_started(job)

        try:
            payload = await self._transport.send(descriptor, job.cancel_token)
            result = parse_server_result(payload)
        except UploadCancelledError:
            outcome = self._settle(job, UploadStatus.CANCELLED)
        except (TransportError, ValidationError) as e:
            outcome = self._settle(job, UploadStatus.FAILED, error=e)
        except asyncio.CancelledError:
            job.cancel_token.cancel()
            self._finish(self._settle(job, UploadStatus.CANCELLED))
            raise
        except Exception as e:
            self._finish(self._settle(job, UploadStatus.FAILED, error=e))
            raise
        else:
            status = UploadStatus.SUCCEEDED if result.ok else UploadStatus.PARTIALLY_FAILED
            outcome = self._settle(job, status, result=result)
            try:
                await self._reload_dataset(outcome)
            except asyncio.CancelledError:
                outcome.reload_error = "interrupted"
                self._finish(outcome)
                raise

        self._finish(outcome)
        return outcome

    def cancel(self) -> bool:
        """Abort the running upload.

        Returns:
            True if this call requested cancellation; False when nothing is
            uploading or cancellation was already requested.
        """
        if self._status is not UploadStatus.UPLOADING or self._job is None:
            return False
        if not self._job.cancel_token.cancel():
            return False
        self.timers.stop()
        logger.info("Cancellation requested for %s", self._job.file.name)
        return True

    def reset(self) -> bool:
        """Dismiss a settled outcome and return to IDLE.

        Returns:
            False if an upload is running (nothing changes), else True.
        """
        if self._status is UploadStatus.UPLOADING:
            return False
        self._status = UploadStatus.IDLE
        self._job = None
        self._outcome = None
        return True

    # =========================================================================
    # Internals
    # =========================================================================

    def _settle(
        self,
        job: UploadJob,
        status: UploadStatus,
        *,
        result: Optional[ServerResult] = None,
        error: Optional[Exception] = None,
    ) -> UploadOutcome:
        self.timers.stop()
        job.cancel_token.invalidate()
        job.status = status
        job.finished_at = datetime.now()
        self._status = status
        return UploadOutcome(
            status=status,
            file_name=job.file.name,
            result=result,
            error=str(error) if error else None,
            exception=error,
            elapsed_ms=self.timers.state.elapsed_ms,
            estimate_ms=job.estimate.total_ms,
        )

    async def _reload_dataset(self, outcome: UploadOutcome) -> None:
        if self._reload is None:
            return
        try:
            await self._reload()
        except SelloutCtlError as e:
            logger.error("Dataset reload after %s failed: %s", outcome.file_name, e)
            outcome.reload_error = str(e)
        except Exception as e:
            logger.exception("Unexpected error reloading sales after %s", outcome.file_name)
            outcome.reload_error = str(e) or type(e).__name__
        else:
            outcome.reloaded = True

    def _finish(self, outcome: UploadOutcome) -> None:
        self._outcome = outcome
        if outcome.failed:
            logger.error("Upload of %s failed: %s", outcome.file_name, outcome.error)
        else:
            logger.info("Upload of %s settled: %s", outcome.file_name, outcome.status.value)
        self._audit.log_operation(
            "upload",
            file=outcome.file_name,
            cod_cliente=outcome.result.cod_cliente if outcome.result else None,
            status=outcome.status.value,
            success=outcome.status is UploadStatus.SUCCEEDED,
            details=outcome.summary(),
        )
        self.reporter.report(outcome)
