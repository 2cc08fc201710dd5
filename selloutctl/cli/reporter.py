"""Rich console rendering of upload progress and outcomes."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.live import Live
from rich.text import Text

from selloutctl.core.output import (
    OutputFormat,
    console as default_console,
    format_duration,
    print_error,
    print_json,
    print_success,
    print_table,
    print_warning,
)
from selloutctl.models.progress import TimerState
from selloutctl.models.upload import UploadJob, UploadOutcome, UploadStatus
from selloutctl.services.orchestrator import ResultReporter

DEFAULT_INCIDENT_PREVIEW = 10


class ConsoleReporter(ResultReporter):
    """Shows a live countdown while uploading, then the outcome summary.

    The live line is transient: it is removed before the outcome is printed so
    terminal messages replace the in-progress notice instead of stacking.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        *,
        output_format: OutputFormat = OutputFormat.TABLE,
        quiet: bool = False,
        incident_preview: int = DEFAULT_INCIDENT_PREVIEW,
    ) -> None:
        """Initialize the reporter.

        Args:
            console: Rich console to draw on (defaults to the shared one).
            output_format: Table or JSON rendering of the outcome.
            quiet: Print only the final status.
            incident_preview: Maximum incidents listed in the table.
        """
        self.console = console or default_console
        self.output_format = output_format
        self.quiet = quiet
        self.incident_preview = incident_preview
        self.reloaded_rows: Optional[int] = None
        self._job: Optional[UploadJob] = None
        self._live: Optional[Live] = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def upload_started(self, job: UploadJob) -> None:
        """Start the transient countdown line (table output only).

        Args:
            job: The job that entered UPLOADING.
        """
        self._job = job
        if self.quiet or self.output_format == OutputFormat.JSON:
            return
        self._live = Live(
            self._render(TimerState(remaining_ms=job.estimate.total_ms)),
            console=self.console,
            transient=True,
            refresh_per_second=4,
        )
        self._live.start()

    def progress(self, state: TimerState) -> None:
        """Redraw the countdown line with the latest clock values."""
        if self._live is not None:
            self._live.update(self._render(state))

    def report(self, outcome: UploadOutcome) -> None:
        """Remove the countdown and print the outcome.

        Quiet mode prints only the status value; JSON mode prints the outcome
        summary plus ``reloaded_rows`` when the sales reload ran.

        Args:
            outcome: The settled upload.
        """
        if self._live is not None:
            self._live.stop()
            self._live = None

        if self.quiet:
            print(outcome.status.value)
            return
        if self.output_format == OutputFormat.JSON:
            data = outcome.summary()
            if self.reloaded_rows is not None:
                data["reloaded_rows"] = self.reloaded_rows
            print_json(data)
            return

        if outcome.status is UploadStatus.CANCELLED:
            print_error(f"Upload of {outcome.file_name} cancelled")
        elif outcome.status is UploadStatus.FAILED:
            print_error(outcome.error or f"Upload of {outcome.file_name} failed")
        else:
            self._report_result(outcome)

    # =========================================================================
    # Rendering
    # =========================================================================

    def _render(self, state: TimerState) -> Text:
        name = self._job.file.name if self._job else ""
        text = Text()
        text.append(f"Uploading {name} ", style="bold")
        if not state.is_seeded:
            text.append("Calculating estimated time...")
        elif state.overrun:
            text.append("Still processing, past the estimate...", style="yellow")
        else:
            text.append(f"Estimated time remaining: {format_duration(state.remaining_ms)}")
        text.append(f"  Elapsed: {format_duration(state.elapsed_ms)}", style="dim")
        text.append("  (Ctrl-C to cancel)", style="dim")
        return text

    def _report_result(self, outcome: UploadOutcome) -> None:
        result = outcome.result
        if result is None:
            return

        if outcome.status is UploadStatus.SUCCEEDED:
            print_success(f"Upload of {outcome.file_name} completed")
        else:
            print_warning(f"Upload of {outcome.file_name} completed with incidents")

        rows = [
            {
                "dataset": name.capitalize(),
                "read": result.read_counts_by_dataset.get(name, 0),
                "processed": result.processed_counts_by_dataset.get(name, 0),
            }
            for name in result.datasets
        ]
        if rows:
            print_table(rows, ["dataset", "read", "processed"])

        self.console.print(
            f"Unmatched codes: [bold]{len(result.unmatched_keys)}[/bold] | "
            f"Incidents: [bold]{len(result.incident_records)}[/bold] | "
            f"Elapsed: {format_duration(outcome.elapsed_ms)}"
        )

        if result.incident_records:
            preview = result.incident_records[: self.incident_preview]
            print_table(
                [
                    {
                        "row": i.row if i.row > 0 else "-",
                        "sheet": i.sheet,
                        "code": i.code,
                        "reason": i.reason,
                    }
                    for i in preview
                ],
                ["row", "sheet", "code", "reason"],
                title="Incidents",
            )
            hidden = len(result.incident_records) - len(preview)
            if hidden > 0:
                self.console.print(
                    f"[dim]... {hidden} more (use --incidents-out to download the full report)[/dim]"
                )

        if outcome.reload_error:
            print_warning(f"Sales reload failed: {outcome.reload_error}")
        elif self.reloaded_rows is not None:
            self.console.print(f"[dim]Sales dataset reloaded: {self.reloaded_rows} rows[/dim]")
