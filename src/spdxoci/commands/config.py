import click

from spdxoci.helper.utils import (
    get_config,
    get_config_path,
    get_docker_config,
    get_strict,
    get_user_agent,
    save_config,
)


@click.group()
def config():
    """Manage configuration."""
    pass


@config.command()
def show():
    """Show the current configuration."""
    cfg = get_config()
    click.echo(f"Config File: {get_config_path()}")
    click.echo(f"User Agent: {get_user_agent(cfg)}")
    click.echo(f"Docker Config: {get_docker_config(cfg) or 'Not set'}")
    click.echo(f"Strict: {get_strict(cfg)}")


@config.command()
@click.option("--user-agent", type=str, help="User agent sent to registries")
@click.option(
    "--docker-config",
    type=click.Path(),
    help="Additional docker config file to read credentials from",
)
@click.option("--strict/--no-strict", default=None, help="Default SPDX parsing mode")
def set(user_agent, docker_config, strict):
    """Set configuration values."""
    cfg = get_config()
    if user_agent is not None:
        cfg['DEFAULT']['user_agent'] = user_agent
    if docker_config is not None:
        cfg['DEFAULT']['docker_config'] = docker_config
    if strict is not None:
        cfg['DEFAULT']['strict'] = str(strict).lower()
    save_config(cfg)
    click.echo(f"Saved configuration to {get_config_path()}")
