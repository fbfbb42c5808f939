import click
import requests

from spdxoci.exceptions import InputError, SpdxOciError
from spdxoci.helper.printer import print_sbom_summary
from spdxoci.helper.utils import (
    exit_with_error,
    get_config,
    get_docker_config,
    get_strict,
    get_user_agent,
)
from spdxoci.oras.annotations import (
    get_annotations,
    merge_annotations,
    parse_annotation_flags,
)
from spdxoci.oras.attach import parse_attach_flags
from spdxoci.oras.credentials import get_credential_resolver
from spdxoci.oras.publish import PublisherConfig, connect_repository
from spdxoci.oras.push import push_sbom
from spdxoci.oras.reference import parse_reference
from spdxoci.oras.sbom import load_sbom_from_file


@click.command()
@click.argument("reference")
@click.option(
    "--file",
    "-f",
    "filename",
    required=True,
    type=click.Path(),
    help="Path to the SPDX SBOM file",
)
@click.option(
    "--annotation",
    "-a",
    "annotation_flags",
    multiple=True,
    help="Manifest annotation as key=value, may be repeated",
)
@click.option(
    "--attach",
    "-t",
    "attach_flags",
    multiple=True,
    help="Artifact to attach to the SBOM as artifactType=path, may be repeated",
)
@click.option(
    "--username",
    "-u",
    envvar="SPDXOCI_REGISTRY_USERNAME",
    help="Username for the registry",
)
@click.option(
    "--password",
    "-p",
    envvar="SPDXOCI_REGISTRY_PASSWORD",
    help="Password for the registry",
)
@click.option(
    "--push-summary",
    "-s",
    is_flag=True,
    default=False,
    help="Push a JSON summary of files and packages as additional layer",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Validate the SBOM against the SPDX schema. --no-strict falls back to plain JSON parsing",
)
def push(
    reference,
    filename,
    annotation_flags,
    attach_flags,
    username,
    password,
    push_summary,
    strict,
):
    """
    Push an SPDX SBOM to an OCI registry

    \b
    Example - Push an SPDX SBOM with annotations
        spdxoci push -f spdx.json localhost:5000/spdx:latest -a key1=value1 -a key2=value2
    Example - Push an SPDX SBOM with attached artifacts (artifactType=path)
        spdxoci push -f spdx.json localhost:5000/spdx:latest -t application/vnd.example.sig=sig.cose
    """
    config = get_config()
    if strict is None:
        strict = get_strict(config)

    try:
        ref = parse_reference(reference)
        input_annotations = parse_annotation_flags(annotation_flags)
        attachments = parse_attach_flags(attach_flags)
    except InputError as e:
        exit_with_error("parsing arguments", e)

    try:
        sbom, desc, sbom_bytes = load_sbom_from_file(filename, strict)
    except SpdxOciError as e:
        exit_with_error("loading SBOM", e)

    print_sbom_summary(sbom, desc)

    annotations = merge_annotations(get_annotations(sbom.document), input_annotations)

    try:
        resolver = get_credential_resolver(
            ref.registry, username, password, get_docker_config(config)
        )
        repository = connect_repository(
            ref, resolver, PublisherConfig(user_agent=get_user_agent(config))
        )
    except (SpdxOciError, ValueError, OSError) as e:
        exit_with_error("connecting to registry", e)

    click.echo(f"Pushing SBOM to {reference}@{desc.digest}...")
    try:
        result = push_sbom(
            sbom,
            desc,
            sbom_bytes,
            reference,
            annotations,
            repository,
            push_summary=push_summary,
            attachments=attachments,
        )
    except (SpdxOciError, ValueError, requests.RequestException) as e:
        exit_with_error("pushing SBOM", e)

    click.echo(f"SBOM pushed to {reference}@{result.descriptor.digest}")
    for attachment in result.attachments:
        click.echo(
            f"Attached {attachment.path} ({attachment.artifact_type}) as {ref.repository_uri}@{attachment.descriptor.digest}"
        )
