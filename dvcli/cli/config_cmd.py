"""Config commands for dvcli."""

from __future__ import annotations

import click

from dvcli.cli.common import handle_errors
from dvcli.core.config import CONFIG_FILE, DEFAULT_TIMEOUT, ENV_TOKEN, Config, get_token
from dvcli.core.output import OutputFormat, print_error, print_key_value, print_output, print_success


@click.group()
def config() -> None:
    """Manage dvcli configuration.

    API tokens are never stored; export DVCLI_TOKEN instead.
    """
    pass


@config.command("init")
@click.option("--url", prompt="Dataverse URL", help="Dataverse instance URL")
@click.option("--profile", default="default", help="Profile name")
@click.option("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Request timeout in seconds")
@click.option("--no-verify-ssl", is_flag=True, help="Disable SSL verification")
@click.option("--force", is_flag=True, help="Overwrite existing profile")
@handle_errors
def config_init(url: str, profile: str, timeout: float, no_verify_ssl: bool, force: bool) -> None:
    """Create configuration file with a new profile.

    Example:
        dvcli config init --url https://demo.dataverse.org
    """
    cfg = Config.load(CONFIG_FILE) if CONFIG_FILE.exists() else Config()
    if cfg.has_profile(profile) and not force:
        print_error(f"Profile '{profile}' already exists. Use --force to overwrite.")
        raise SystemExit(1)

    saved = cfg.add_profile(
        name=profile, url=url, verify_ssl=not no_verify_ssl, timeout=timeout, overwrite=force
    )
    cfg.save(CONFIG_FILE)

    print_success(f"Configuration saved to {CONFIG_FILE}")
    print_key_value(
        {
            "profile": profile,
            "url": saved.url,
            "verify_ssl": saved.verify_ssl,
            "timeout": f"{saved.timeout}s",
        }
    )
    if not get_token():
        click.echo(f"Set {ENV_TOKEN} to authenticate requests.", err=True)


@config.command("show")
@click.option("--output", "-o", type=click.Choice(["json", "table"]), default="json")
@handle_errors
def config_show(output: str) -> None:
    """Show current configuration."""
    cfg = Config.load(CONFIG_FILE)

    if not cfg.profiles:
        print_error("No configuration found. Run 'dvcli config init' first.")
        raise SystemExit(1)

    data = {
        "config_file": str(CONFIG_FILE),
        "default_profile": cfg.default_profile,
        "output_format": cfg.output_format,
        "token_set": bool(get_token()),
        "profiles": list(cfg.profiles.keys()),
    }

    if output == "json":
        data["profile_details"] = {name: p.to_dict() for name, p in cfg.profiles.items()}
        print_output(data, format=OutputFormat.JSON)
        return

    print_key_value(data, title="Configuration")
    for name, profile in cfg.profiles.items():
        marker = " (default)" if name == cfg.default_profile else ""
        click.echo()
        click.echo(f"Profile: {name}{marker}")
        print_key_value(
            {
                "url": profile.url,
                "verify_ssl": profile.verify_ssl,
                "timeout": f"{profile.timeout}s",
            }
        )


@config.command("use-context")
@click.argument("profile")
@handle_errors
def config_use_context(profile: str) -> None:
    """Switch the active profile.

    Example:
        dvcli config use-context demo
    """
    cfg = Config.load(CONFIG_FILE)

    if not cfg.has_profile(profile):
        print_error(f"Profile '{profile}' not found.")
        click.echo(f"Available profiles: {', '.join(cfg.profiles.keys())}", err=True)
        raise SystemExit(1)

    cfg.set_default_profile(profile)
    cfg.save(CONFIG_FILE)

    print_success(f"Switched to profile '{profile}'")


@config.command("current-context")
@handle_errors
def config_current_context() -> None:
    """Show the current active profile."""
    cfg = Config.load(CONFIG_FILE)

    if not cfg.profiles:
        print_error("No configuration found.")
        raise SystemExit(1)

    click.echo(cfg.default_profile)


@config.command("add-profile")
@click.argument("name")
@click.option("--url", required=True, help="Dataverse instance URL")
@click.option("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Request timeout in seconds")
@click.option("--no-verify-ssl", is_flag=True, help="Disable SSL verification")
@handle_errors
def config_add_profile(name: str, url: str, timeout: float, no_verify_ssl: bool) -> None:
    """Add a new profile.

    Example:
        dvcli config add-profile demo --url https://demo.dataverse.org
    """
    cfg = Config.load(CONFIG_FILE)
    cfg.add_profile(name=name, url=url, timeout=timeout, verify_ssl=not no_verify_ssl)
    cfg.save(CONFIG_FILE)

    print_success(f"Profile '{name}' added")


@config.command("remove-profile")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@handle_errors
def config_remove_profile(name: str, yes: bool) -> None:
    """Remove a profile.

    Example:
        dvcli config remove-profile demo
    """
    cfg = Config.load(CONFIG_FILE)

    if not cfg.has_profile(name):
        print_error(f"Profile '{name}' not found.")
        raise SystemExit(1)

    if not yes and name != cfg.default_profile:
        click.confirm(f"Remove profile '{name}'?", abort=True)

    cfg.remove_profile(name)
    cfg.save(CONFIG_FILE)

    print_success(f"Profile '{name}' removed")
