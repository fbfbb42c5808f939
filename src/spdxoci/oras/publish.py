import json
import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Union

from spdxoci.oras import defaults
from spdxoci.oras.credentials import CredentialResolver
from spdxoci.oras.descriptor import Descriptor
from spdxoci.oras.reference import Reference, parse_reference
from spdxoci.oras.registry import RegistryStore
from spdxoci.oras.store import ContentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublisherConfig:
    user_agent: str = defaults.user_agent
    default_tag: str = defaults.default_tag


def resolve_tag(reference: str, default_tag: str = defaults.default_tag) -> str:
    """Return the tag or digest of `reference`, or `default_tag` if it has none."""
    return parse_reference(reference).tag_or_default(default_tag)


def connect_repository(
    reference: Union[str, Reference],
    credential_resolver: Optional[CredentialResolver] = None,
    config: Optional[PublisherConfig] = None,
) -> RegistryStore:
    """
    Open the repository of `reference` as a content store. The tag or digest
    of the reference is dropped, so the store can be reused for the SBOM and
    its attachments.
    """
    if isinstance(reference, str):
        reference = parse_reference(reference)
    if config is None:
        config = PublisherConfig()
    return RegistryStore(
        reference.with_reference(""),
        credential_resolver,
        user_agent=config.user_agent,
    )


def _successors(data: bytes) -> List[Descriptor]:
    manifest = json.loads(data)
    successors = []
    if manifest.get("config"):
        successors.append(Descriptor.from_dict(manifest["config"]))
    successors.extend(Descriptor.from_dict(layer) for layer in manifest.get("layers", []))
    successors.extend(Descriptor.from_dict(m) for m in manifest.get("manifests", []))
    return successors


def copy_graph(source: ContentStore, descriptor: Descriptor, dest: ContentStore):
    """Copy `descriptor` and everything it references, children first."""
    if dest.exists(descriptor):
        logger.debug(f"{descriptor.digest} exists at destination, skipping")
        return

    data = source.fetch(descriptor)
    if descriptor.media_type in defaults.manifest_media_types:
        for successor in _successors(data):
            copy_graph(source, successor, dest)

    dest.push(descriptor, data)
    logger.debug(f"copied {descriptor.media_type} {descriptor.digest}")


def copy_referrers(
    source: ContentStore,
    descriptor: Descriptor,
    dest: ContentStore,
    seen: Optional[Set[str]] = None,
):
    if seen is None:
        seen = set()
    for referrer in source.referrers(descriptor):
        if referrer.digest in seen:
            continue
        seen.add(referrer.digest)
        copy_graph(source, referrer, dest)
        copy_referrers(source, referrer, dest, seen)


def publish(source: ContentStore, reference: str, dest: ContentStore) -> Descriptor:
    """
    Copy the manifest `reference` points at in `source` to `dest`, with all of
    its blobs and every referrer `source` knows of. The manifest is tagged as
    `reference` at `dest` unless the reference is its digest.

    :return: descriptor of the copied manifest
    """
    descriptor = source.resolve(reference)
    copy_graph(source, descriptor, dest)
    if reference != descriptor.digest:
        dest.tag(descriptor, reference)
    copy_referrers(source, descriptor, dest)
    logger.info(f"published {descriptor.digest} as {reference}")
    return descriptor
