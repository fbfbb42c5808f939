import configparser
import os
import sys

import click

from spdxoci.oras import defaults

CONFIG_FILE = 'config.ini'
CONFIG_ENV = 'SPDXOCI_CONFIG'


def get_config_path():
    return os.getenv(CONFIG_ENV, CONFIG_FILE)


def get_config():
    config = configparser.ConfigParser()
    config_path = get_config_path()
    if os.path.exists(config_path):
        config.read(config_path)
    return config


def save_config(config):
    with open(get_config_path(), 'w') as configfile:
        config.write(configfile)


def get_user_agent(config) -> str:
    return config['DEFAULT'].get('user_agent', defaults.user_agent)


def get_docker_config(config):
    return config['DEFAULT'].get('docker_config') or None


def get_strict(config) -> bool:
    return config['DEFAULT'].getboolean('strict', fallback=True)


def exit_with_error(operation: str, error: Exception):
    click.echo(f"Error {operation}: {error}", err=True)
    sys.exit(1)
