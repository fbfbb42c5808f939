import json
import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from spdxoci.exceptions import DigestMismatchError
from spdxoci.oras import defaults
from spdxoci.oras.attach import AttachmentResult, attach_all
from spdxoci.oras.crypto import is_digest
from spdxoci.oras.descriptor import Descriptor, describe
from spdxoci.oras.manifest import pack_manifest
from spdxoci.oras.publish import publish, resolve_tag
from spdxoci.oras.sbom import SPDXDocument, get_sbom_summary
from spdxoci.oras.store import ContentStore, MemoryStore

logger = logging.getLogger(__name__)


@dataclass
class PushResult:
    """
    Outcome of pushing an SBOM.

    Attributes:
        descriptor: the SBOM manifest as published
        tag: tag or digest the manifest was published under
        attachments: referrer manifests published for the attachments, in order
    """

    descriptor: Descriptor
    tag: str
    attachments: List[AttachmentResult] = field(default_factory=list)


def push_sbom(
    sbom: SPDXDocument,
    sbom_descriptor: Descriptor,
    sbom_bytes: bytes,
    reference: str,
    annotations: Mapping[str, str],
    dest: ContentStore,
    push_summary: bool = False,
    attachments: Optional[Mapping[str, List[str]]] = None,
) -> PushResult:
    """
    Stage the SBOM as an OCI artifact, copy it to `dest` and attach
    `attachments` to it.

    The tag comes from `reference`, "latest" when it carries none. A digest
    reference has to match the packed manifest and is published untagged.
    """
    mem = MemoryStore()
    mem.push(sbom_descriptor, sbom_bytes)
    layers = [sbom_descriptor]

    if push_summary:
        summary_bytes = json.dumps(get_sbom_summary(sbom.document)).encode("utf-8")
        summary_descriptor = describe(summary_bytes, defaults.media_type_summary)
        mem.push(summary_descriptor, summary_bytes)
        layers.append(summary_descriptor)

    manifest_descriptor = pack_manifest(
        mem, defaults.media_type_spdx, layers, annotations=annotations
    )

    tag = resolve_tag(reference)
    if is_digest(tag):
        if tag != manifest_descriptor.digest:
            raise DigestMismatchError(
                f"SBOM manifest {manifest_descriptor.digest} does not match {tag}"
            )
    else:
        mem.tag(manifest_descriptor, tag)

    descriptor = publish(mem, tag, dest)
    result = PushResult(descriptor=descriptor, tag=tag)

    if attachments:
        result.attachments = attach_all(attachments, descriptor, dest)

    return result
