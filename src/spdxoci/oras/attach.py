import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping

import requests

from spdxoci.exceptions import (
    AttachFormatError,
    AttachmentError,
    SpdxOciError,
    SubjectNotFoundError,
)
from spdxoci.oras.artifact import load_artifact_from_file
from spdxoci.oras.descriptor import Descriptor
from spdxoci.oras.manifest import pack_manifest
from spdxoci.oras.publish import publish
from spdxoci.oras.store import ContentStore, MemoryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttachmentResult:
    artifact_type: str
    path: str
    descriptor: Descriptor


def parse_attach_flags(flags: Iterable[str]) -> Dict[str, List[str]]:
    """
    Parse artifactType=path flags into an attachment set. Repeating an
    artifact type adds another path for it.
    """
    attachments: Dict[str, List[str]] = {}
    for flag in flags:
        artifact_type, sep, path = flag.partition("=")
        if not sep or not artifact_type or not path:
            raise AttachFormatError(f"missing key in `--attach` flag: {flag}")
        attachments.setdefault(artifact_type, []).append(path)
    return attachments


def attach_artifact(
    subject: Descriptor,
    artifact_descriptor: Descriptor,
    artifact_type: str,
    artifact_bytes: bytes,
    dest: ContentStore,
) -> Descriptor:
    """
    Publish an artifact as referrer of `subject`, which must already exist at
    `dest`. The referrer manifest is tagged with its own digest so
    attachments never move a tag.

    :return: descriptor of the referrer manifest
    """
    if not dest.exists(subject):
        raise SubjectNotFoundError(f"subject not present: {subject.digest}")

    mem = MemoryStore()
    mem.push(artifact_descriptor, artifact_bytes)
    manifest_desc = pack_manifest(
        mem,
        artifact_type,
        [artifact_descriptor],
        subject=subject,
        subject_store=dest,
    )
    mem.tag(manifest_desc, manifest_desc.digest)
    return publish(mem, manifest_desc.digest, dest)


def attach_all(
    attachments: Mapping[str, List[str]],
    subject: Descriptor,
    dest: ContentStore,
) -> List[AttachmentResult]:
    """
    Attach every path of every artifact type to `subject`, in the given order.

    The first failure stops the run. Attachments published before it stay
    published.
    """
    results = []
    for artifact_type, paths in attachments.items():
        for path in paths:
            try:
                desc, data = load_artifact_from_file(path, artifact_type)
                manifest_desc = attach_artifact(subject, desc, artifact_type, data, dest)
            except (SpdxOciError, ValueError, OSError, requests.RequestException) as e:
                raise AttachmentError(artifact_type, path, e) from e
            logger.info(f"attached {path} as {artifact_type}: {manifest_desc.digest}")
            results.append(AttachmentResult(artifact_type, path, manifest_desc))
    return results
