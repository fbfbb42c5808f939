import click

from spdxoci.exceptions import SpdxOciError
from spdxoci.helper.utils import exit_with_error
from spdxoci.oras.sbom import get_files, get_packages, load_sbom_from_file

file_option = click.option(
    "--file",
    "-f",
    "filename",
    required=True,
    type=click.Path(),
    help="Path to the SPDX SBOM file",
)


def _load_document(filename):
    try:
        sbom, _, _ = load_sbom_from_file(filename, strict=True)
    except SpdxOciError as e:
        exit_with_error("loading SBOM", e)
    return sbom.document


@click.command()
@file_option
def files(filename):
    """List files of the SBOM"""
    for name in get_files(_load_document(filename)):
        click.echo(name)


@click.command()
@file_option
def packages(filename):
    """List package locators (purls, cpes, ...) of the SBOM"""
    for locator in get_packages(_load_document(filename)):
        click.echo(locator)
