"""Config commands for selloutctl."""

from __future__ import annotations

from typing import Optional

import click

from selloutctl.core.config import CONFIG_FILE, Config
from selloutctl.core.exceptions import SelloutCtlError
from selloutctl.core.output import OutputFormat, print_error, print_key_value, print_output, print_success
from selloutctl.core.timeouts import DEFAULT_HTTP_TIMEOUT_SECONDS, DEFAULT_UPLOAD_TIMEOUT_SECONDS
from selloutctl.core.validation import validate_server_url


@click.group()
def config() -> None:
    """Manage selloutctl configuration."""
    pass


@config.command("init")
@click.option("--url", prompt="Sellout API URL", help="Sellout API base URL (e.g. https://host/api-sellout/rm)")
@click.option("--profile", default="default", help="Profile name")
@click.option("--cod-cliente", default=None, help="Default client code sent with uploads")
@click.option("--timeout", type=int, default=DEFAULT_HTTP_TIMEOUT_SECONDS, help="Request timeout in seconds")
@click.option(
    "--upload-timeout",
    type=int,
    default=DEFAULT_UPLOAD_TIMEOUT_SECONDS,
    help="Upload deadline in seconds",
)
@click.option("--no-verify-ssl", is_flag=True, help="Disable SSL verification")
@click.option("--force", is_flag=True, help="Overwrite existing profile")
def config_init(
    url: str,
    profile: str,
    cod_cliente: Optional[str],
    timeout: int,
    upload_timeout: int,
    no_verify_ssl: bool,
    force: bool,
) -> None:
    """Create configuration file with a new profile.

    Example:
        selloutctl config init --url https://sellout.example.com/api-sellout/rm
    """
    try:
        url = validate_server_url(url)
    except SelloutCtlError as e:
        print_error(str(e))
        raise SystemExit(1)

    if CONFIG_FILE.exists():
        cfg = Config.load()
        if cfg.has_profile(profile) and not force:
            print_error(f"Profile '{profile}' already exists. Use --force to overwrite.")
            raise SystemExit(1)
    else:
        cfg = Config()

    cfg.add_profile(
        name=profile,
        url=url,
        verify_ssl=not no_verify_ssl,
        timeout=timeout,
        upload_timeout=upload_timeout,
        cod_cliente=cod_cliente,
    )

    if len(cfg.profiles) == 1:
        cfg.default_profile = profile

    cfg.save()

    print_success(f"Configuration saved to {CONFIG_FILE}")
    print_key_value(
        {
            "profile": profile,
            "url": url,
            "cod_cliente": cod_cliente or "-",
        }
    )


@config.command("show")
@click.option("--output", "-o", type=click.Choice(["json", "table"]), default="table")
def config_show(output: str) -> None:
    """Show current configuration."""
    try:
        cfg = Config.load()
    except SelloutCtlError as e:
        print_error(f"Failed to load config: {e}")
        raise SystemExit(1)

    if not cfg.profiles:
        print_error("No configuration found. Run 'selloutctl config init' first.")
        raise SystemExit(1)

    data = {
        "config_file": str(CONFIG_FILE),
        "default_profile": cfg.default_profile,
        "output_format": cfg.output_format,
        "profiles": list(cfg.profiles.keys()),
    }

    if output == "json":
        data["profile_details"] = {name: p.to_dict() for name, p in cfg.profiles.items()}
        print_output(data, format=OutputFormat.JSON)
        return

    print_key_value(data, title="Configuration")
    click.echo()
    for name, profile in cfg.profiles.items():
        marker = " (default)" if name == cfg.default_profile else ""
        click.echo(f"Profile: {name}{marker}")
        print_key_value(
            {
                "url": profile.url,
                "verify_ssl": profile.verify_ssl,
                "timeout": f"{profile.timeout}s",
                "upload_timeout": f"{profile.upload_timeout}s",
                "cod_cliente": profile.cod_cliente or "-",
            }
        )
        click.echo()


@config.command("use-context")
@click.argument("profile")
def config_use_context(profile: str) -> None:
    """Switch the active profile.

    Example:
        selloutctl config use-context staging
    """
    cfg = Config.load()

    if not cfg.has_profile(profile):
        print_error(f"Profile '{profile}' not found.")
        click.echo(f"Available profiles: {', '.join(cfg.profiles.keys())}")
        raise SystemExit(1)

    cfg.set_default_profile(profile)
    cfg.save()

    print_success(f"Switched to profile '{profile}'")


@config.command("remove-profile")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def config_remove_profile(name: str, yes: bool) -> None:
    """Remove a profile.

    Example:
        selloutctl config remove-profile staging
    """
    cfg = Config.load()

    if not cfg.has_profile(name):
        print_error(f"Profile '{name}' not found.")
        raise SystemExit(1)

    if name == cfg.default_profile:
        print_error("Cannot remove the default profile. Switch to another profile first.")
        raise SystemExit(1)

    if not yes:
        click.confirm(f"Remove profile '{name}'?", abort=True)

    cfg.remove_profile(name)
    cfg.save()

    print_success(f"Profile '{name}' removed")
