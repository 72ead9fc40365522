"""CLI main entry point."""

import json
import sys

import click

from .commands import status, wait
from .config import CONFIG_KEYS, get_config_path, load_config, save_config, unset_config
from .formatters import print_config_yaml
from .shared.logging import configure_logging, level_from_verbosity


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write logs to a file")
@click.pass_context
def cli(ctx: click.Context, verbose: int, json_output: bool, log_file: str | None) -> None:
    """Wait for a self-hosted Kubernetes control plane to converge."""
    ctx.ensure_object(dict)
    cli_config = load_config()

    configure_logging(
        level_from_verbosity(verbose, default=cli_config.log_level),
        log_file=log_file,
        json_output=log_file is not None,
    )

    ctx.obj["config"] = cli_config
    ctx.obj["verbose"] = verbose
    ctx.obj["json_output"] = json_output


cli.add_command(wait)
cli.add_command(status)


@cli.group()
def config() -> None:
    """Manage CLI configuration."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration and where each value came from."""
    cli_config = ctx.obj["config"]
    data = cli_config.to_dict()
    sources = {key: cli_config.get_source(key) for key in CONFIG_KEYS}

    if ctx.obj["json_output"]:
        click.echo(json.dumps({"values": data, "sources": sources}, indent=2))
        return

    click.echo("Bootwatch CLI Configuration")
    click.echo(f"File: {get_config_path()}\n")
    print_config_yaml(data)
    click.echo("Sources:")
    for key, source in sources.items():
        click.echo(f"  {key}: {source}")


@config.command("set")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value.

    Pods are given as a comma separated list.
    """
    try:
        save_config(key, value)
    except ValueError as e:
        click.echo(f"✗ Invalid value for {key}: {e}", err=True)
        sys.exit(1)
    click.echo(f"✓ {key} saved to {get_config_path()}")


@config.command("unset")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
def config_unset(key: str) -> None:
    """Remove a persisted configuration value."""
    if unset_config(key):
        click.echo(f"✓ {key} removed")
    else:
        click.echo(f"{key} is not set in {get_config_path()}")


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
