#!/bin/env python3

import logging
import sys

import click

from spdxoci.commands import config, files, push, show


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose):
    """Push SPDX SBOMs to OCI registries"""
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
    )


cli.add_command(push.push)
cli.add_command(show.show)
cli.add_command(files.files)
cli.add_command(files.packages)
cli.add_command(config.config)


if __name__ == '__main__':
    cli()
