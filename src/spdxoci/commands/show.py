import click

from spdxoci.exceptions import SpdxOciError
from spdxoci.helper.printer import print_sbom_summary
from spdxoci.helper.utils import exit_with_error, get_config, get_strict
from spdxoci.oras.sbom import load_sbom_from_file


@click.command()
@click.option(
    "--file",
    "-f",
    "filename",
    required=True,
    type=click.Path(),
    help="Path to the SPDX SBOM file",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Validate the SBOM against the SPDX schema. --no-strict falls back to plain JSON parsing",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "yaml"]),
    default="text",
    show_default=True,
    help="Output format of the summary",
)
def show(filename, strict, output_format):
    """Show the SPDX summary fields"""
    if strict is None:
        strict = get_strict(get_config())
    try:
        sbom, desc, _ = load_sbom_from_file(filename, strict)
    except SpdxOciError as e:
        exit_with_error("loading SBOM", e)
    print_sbom_summary(sbom, desc, output_format)
