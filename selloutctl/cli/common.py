"""Common CLI utilities, decorators, and helpers."""

from __future__ import annotations

import sys
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

import click

from selloutctl.core.client import SelloutClient
from selloutctl.core.config import Config, Profile
from selloutctl.core.exceptions import (
    ConfigurationError,
    ProfileNotFoundError,
    SelloutCtlError,
    TransportError,
    UploadCancelledError,
    ValidationError,
)
from selloutctl.core.logging import setup_logging
from selloutctl.core.output import OutputFormat, print_error

F = TypeVar("F", bound=Callable[..., Any])


# =============================================================================
# Context Object
# =============================================================================


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[Config] = None
        self.profile_name: Optional[str] = None
        self.output_format: OutputFormat = OutputFormat.TABLE
        self.quiet: bool = False
        self.verbose: bool = False

    def get_profile(self) -> Profile:
        """Resolve the active profile.

        Raises:
            ConfigurationError: If no profile configured.
        """
        if self.config is None:
            self.config = Config.load()

        try:
            return self.config.get_profile(self.profile_name)
        except ProfileNotFoundError:
            raise ConfigurationError(
                f"Profile '{self.profile_name or self.config.default_profile}' not found. "
                "Run 'selloutctl config init' or set SELLOUT_URL."
            )

    def get_client(self) -> SelloutClient:
        """Create a client for the active profile.

        The client is async and must be closed by the caller
        (``async with ctx.get_client() as client``).
        """
        profile = self.get_profile()
        return SelloutClient(
            base_url=profile.url,
            timeout=profile.timeout,
            verify_ssl=profile.verify_ssl,
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


# =============================================================================
# Global Options
# =============================================================================


def global_options(f: F) -> F:
    """Add global options to a command."""

    @click.option(
        "--profile",
        "-p",
        envvar="SELLOUT_PROFILE",
        help="Config profile to use",
    )
    @click.option(
        "--output",
        "-o",
        "output_format",
        type=click.Choice(["json", "table"]),
        default="table",
        help="Output format",
    )
    @click.option(
        "--quiet",
        "-q",
        is_flag=True,
        help="Minimal output",
    )
    @click.option(
        "--verbose",
        "-v",
        is_flag=True,
        help="Enable verbose output",
    )
    @pass_context
    @wraps(f)
    def wrapper(
        ctx: Context,
        profile: Optional[str],
        output_format: str,
        quiet: bool,
        verbose: bool,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """Populate context from global options and invoke the command."""
        ctx.profile_name = profile
        ctx.output_format = OutputFormat.from_string(output_format)
        ctx.quiet = quiet
        ctx.verbose = verbose

        setup_logging(quiet=quiet, verbose=verbose)

        ctx.config = Config.load()

        return f(ctx, *args, **kwargs)

    return wrapper  # type: ignore


# =============================================================================
# Exit Codes
# =============================================================================


class ExitCode:
    """Standard exit codes."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    NETWORK_ERROR = 3
    USER_CANCELLED = 5
    PARTIAL_FAILURE = 6
    VALIDATION_ERROR = 7


# =============================================================================
# Error Handling
# =============================================================================


def handle_errors(f: F) -> F:
    """Handle common errors and convert to exit codes."""

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """Capture errors and exit with consistent messaging."""
        try:
            return f(*args, **kwargs)
        except UploadCancelledError as e:
            print_error(str(e))
            sys.exit(ExitCode.USER_CANCELLED)
        except ValidationError as e:
            print_error(str(e))
            sys.exit(ExitCode.VALIDATION_ERROR)
        except TransportError as e:
            print_error(str(e))
            sys.exit(ExitCode.NETWORK_ERROR)
        except SelloutCtlError as e:
            print_error(str(e))
            sys.exit(ExitCode.GENERAL_ERROR)
        except click.ClickException:
            raise
        except Exception as e:
            print_error(f"Unexpected error: {e}")
            sys.exit(ExitCode.GENERAL_ERROR)

    return wrapper  # type: ignore
