import json

import click
import yaml

from spdxoci.oras.descriptor import Descriptor
from spdxoci.oras.sbom import SPDXDocument

LABEL_WIDTH = 23


def _line(label: str, value):
    click.echo(f"{label + ':':<{LABEL_WIDTH}}{value}")


def sbom_summary(sbom: SPDXDocument, desc: Descriptor) -> dict:
    doc = sbom.document
    summary = {
        "name": doc.name,
        "namespace": doc.namespace,
        "spdxVersion": sbom.version,
        "packages": len(doc.packages),
        "files": len(doc.files),
        "digest": desc.digest,
        "size": desc.size,
    }
    if doc.creation_info is not None:
        summary["created"] = doc.creation_info.created
        summary["creators"] = [str(c) for c in doc.creation_info.creators]
    return summary


def print_sbom_summary(sbom: SPDXDocument, desc: Descriptor, output_format: str = "text"):
    if output_format == "json":
        click.echo(json.dumps(sbom_summary(sbom, desc), indent=4))
        return
    if output_format == "yaml":
        click.echo(yaml.safe_dump(sbom_summary(sbom, desc), sort_keys=False), nl=False)
        return

    doc = sbom.document
    click.echo("=" * 80)
    _line("Document Name", doc.name)
    _line("Document Namespace", doc.namespace)
    _line("SPDX Version", sbom.version)
    if doc.creation_info is not None:
        _line("Creation Date", doc.creation_info.created)
        creators = [str(c) for c in doc.creation_info.creators]
        if len(creators) == 1:
            _line("Creator", creators[0])
        elif creators:
            _line("Creators", creators[0])
            for creator in creators[1:]:
                click.echo(f"{'':<{LABEL_WIDTH}}{creator}")
    _line("Packages", len(doc.packages))
    _line("Files", len(doc.files))
    _line("Digest", desc.digest)
    click.echo("=" * 80)
