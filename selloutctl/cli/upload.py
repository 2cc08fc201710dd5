"""Upload commands for selloutctl."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Optional

import click

from selloutctl.cli.common import Context, ExitCode, global_options, handle_errors
from selloutctl.cli.reporter import ConsoleReporter
from selloutctl.core.exceptions import ValidationError
from selloutctl.core.output import (
    OutputFormat,
    format_duration,
    print_info,
    print_output,
    print_success,
    print_warning,
)
from selloutctl.core.validation import validate_upload_file
from selloutctl.models.upload import UploadOutcome, UploadStatus
from selloutctl.services.estimator import BYTES_PER_MB, estimate_duration
from selloutctl.services.orchestrator import UploadOrchestrator
from selloutctl.services.transport import AbortableTransport
from selloutctl.services.ventas import VentaService

logger = logging.getLogger(__name__)

EXIT_CODES = {
    UploadStatus.SUCCEEDED: ExitCode.SUCCESS,
    UploadStatus.PARTIALLY_FAILED: ExitCode.PARTIAL_FAILURE,
    UploadStatus.CANCELLED: ExitCode.USER_CANCELLED,
    UploadStatus.FAILED: ExitCode.NETWORK_ERROR,
}


def exit_code_for(outcome: UploadOutcome) -> int:
    """Map a settled upload to the command's exit code."""
    if outcome.status is UploadStatus.FAILED and isinstance(outcome.exception, ValidationError):
        return ExitCode.VALIDATION_ERROR
    return EXIT_CODES.get(outcome.status, ExitCode.GENERAL_ERROR)


def interrupt_handler(
    orchestrator: UploadOrchestrator, task: Optional[asyncio.Task]
) -> Callable[[], None]:
    """Build the SIGINT callback for one upload command.

    The first interrupt cancels the in-flight upload. Once the upload has
    settled (reloading sales, downloading incidents) or a cancel is already
    pending, an interrupt stops ``task`` instead.
    """

    def _interrupt() -> None:
        if orchestrator.cancel():
            return
        if task is not None and not task.done():
            logger.info("Interrupted while %s; stopping", orchestrator.status.value)
            task.cancel()

    return _interrupt


@contextlib.contextmanager
def _cancel_on_interrupt(orchestrator: UploadOrchestrator) -> Iterator[None]:
    """Route SIGINT to the orchestrator while the command runs."""
    loop = asyncio.get_running_loop()
    handler = interrupt_handler(orchestrator, asyncio.current_task())
    installed = False
    with contextlib.suppress(NotImplementedError, RuntimeError):
        loop.add_signal_handler(signal.SIGINT, handler)
        installed = True
    try:
        yield
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)


async def run_upload(
    ctx: Context,
    file: Path,
    *,
    cod_cliente: Optional[str] = None,
    incidents_out: Optional[Path] = None,
    reload: bool = True,
) -> UploadOutcome:
    """Upload one spreadsheet with the active profile and report the outcome."""
    profile = ctx.get_profile()
    cod_cliente = cod_cliente or profile.cod_cliente
    reporter = ConsoleReporter(output_format=ctx.output_format, quiet=ctx.quiet)

    async with ctx.get_client() as client:
        transport = AbortableTransport(
            client,
            cod_cliente=cod_cliente,
            deadline=profile.upload_timeout,
        )
        ventas = VentaService(client)

        async def reload_dataset() -> None:
            rows = await ventas.list_ventas(cod_cliente=cod_cliente)
            reporter.reloaded_rows = len(rows)

        orchestrator = UploadOrchestrator(
            transport,
            reload=reload_dataset if reload else None,
            reporter=reporter,
        )
        with _cancel_on_interrupt(orchestrator):
            outcome = await orchestrator.start(file)

            if (
                incidents_out is not None
                and outcome.completed
                and outcome.result is not None
                and outcome.result.has_incidents
                and orchestrator.job is not None
            ):
                artifact = await transport.download_diagnostic(orchestrator.job.file)
                target = artifact.save(incidents_out)
                if not ctx.quiet:
                    print_success(f"Incident report saved to {target}")

    return outcome


@click.command("upload")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--cod-cliente", default=None, help="Client code (defaults to the profile's)")
@click.option(
    "--incidents-out",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Save the incident report here when the upload reports incidents",
)
@click.option("--no-reload", is_flag=True, help="Skip reloading the sales dataset afterwards")
@global_options
@handle_errors
def upload(
    ctx: Context,
    file: Path,
    cod_cliente: Optional[str],
    incidents_out: Optional[Path],
    no_reload: bool,
) -> None:
    """Upload a sellout spreadsheet (.xlsx or .xls).

    Shows a countdown based on the file size; press Ctrl-C to cancel.

    Example:
        selloutctl upload ventas_marzo.xlsx --incidents-out ./reports
    """
    try:
        outcome = asyncio.run(
            run_upload(
                ctx,
                file,
                cod_cliente=cod_cliente,
                incidents_out=incidents_out,
                reload=not no_reload,
            )
        )
    except asyncio.CancelledError:
        print_warning("Interrupted")
        sys.exit(ExitCode.USER_CANCELLED)

    code = exit_code_for(outcome)
    if code != ExitCode.SUCCESS:
        sys.exit(code)


@click.command("incidents")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--dir",
    "-d",
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory to save the report into",
)
@click.option("--cod-cliente", default=None, help="Client code (defaults to the profile's)")
@global_options
@handle_errors
def incidents(
    ctx: Context,
    file: Path,
    directory: Path,
    cod_cliente: Optional[str],
) -> None:
    """Download the incident report for a spreadsheet.

    The backend processes the file and answers with its incident list as a
    text file instead of the JSON summary.
    """
    descriptor = validate_upload_file(file)
    profile = ctx.get_profile()

    async def _download() -> Path:
        async with ctx.get_client() as client:
            transport = AbortableTransport(
                client,
                cod_cliente=cod_cliente or profile.cod_cliente,
                deadline=profile.upload_timeout,
            )
            artifact = await transport.download_diagnostic(descriptor)
        return artifact.save(directory)

    target = asyncio.run(_download())
    if ctx.quiet:
        click.echo(str(target))
    else:
        print_success(f"Incident report saved to {target}")


@click.command("estimate")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@global_options
@handle_errors
def estimate(ctx: Context, file: Path) -> None:
    """Show how long an upload of FILE is expected to take."""
    descriptor = validate_upload_file(file)
    result = estimate_duration(descriptor.size_bytes)

    data = {
        "file": descriptor.name,
        "size_mb": round(descriptor.size_bytes / BYTES_PER_MB, 2),
        "estimate_ms": result.total_ms,
        "estimate": format_duration(result.total_ms),
    }
    if ctx.quiet:
        click.echo(result.total_ms)
        return
    print_output(data, format=ctx.output_format)
    if ctx.output_format == OutputFormat.TABLE:
        print_info("Includes transfer and server processing time")
