import json
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from spdxoci.exceptions import DigestMismatchError, NotFoundError
from spdxoci.oras import defaults
from spdxoci.oras.crypto import verify_sha256
from spdxoci.oras.descriptor import Descriptor

logger = logging.getLogger(__name__)


class ContentStore(ABC):
    """Content addressable storage with named references (tags)."""

    @abstractmethod
    def push(self, descriptor: Descriptor, data: bytes):
        """Store `data` under `descriptor`. Known content is not stored twice."""

    @abstractmethod
    def exists(self, descriptor: Descriptor) -> bool:
        pass

    @abstractmethod
    def fetch(self, descriptor: Descriptor) -> bytes:
        """Return the content of `descriptor` or raise NotFoundError."""

    @abstractmethod
    def tag(self, descriptor: Descriptor, reference: str):
        """Point `reference` at the manifest `descriptor`."""

    @abstractmethod
    def resolve(self, reference: str) -> Descriptor:
        """Return the descriptor a tag or digest points at."""

    @abstractmethod
    def referrers(
        self, descriptor: Descriptor, artifact_type: Optional[str] = None
    ) -> List[Descriptor]:
        """Return the manifests declaring `descriptor` as their subject."""


def referrer_descriptor(descriptor: Descriptor, manifest: dict) -> Descriptor:
    """Describe a manifest the way it is listed in a referrers index."""
    artifact_type = manifest.get("artifactType")
    if not artifact_type:
        artifact_type = manifest.get("config", {}).get("mediaType")
    return Descriptor(
        media_type=descriptor.media_type,
        digest=descriptor.digest,
        size=descriptor.size,
        annotations=manifest.get("annotations") or None,
        artifact_type=artifact_type,
    )


class MemoryStore(ContentStore):
    """
    In-process staging store.

    Content is keyed by digest. Manifests that carry a subject are indexed so
    they can be listed as referrers of that subject.
    """

    def __init__(self):
        self._content: Dict[str, bytes] = {}
        self._descriptors: Dict[str, Descriptor] = {}
        self._tags: Dict[str, Descriptor] = {}
        self._referrers: Dict[str, Dict[str, Descriptor]] = {}

    def __len__(self):
        return len(self._content)

    def push(self, descriptor: Descriptor, data: bytes):
        if len(data) != descriptor.size:
            raise DigestMismatchError(
                f"size mismatch for {descriptor.digest}: {len(data)} != {descriptor.size}"
            )
        verify_sha256(descriptor.digest, data)

        if descriptor.digest in self._content:
            logger.debug(f"{descriptor.digest} already staged")
            return

        self._content[descriptor.digest] = data
        self._descriptors[descriptor.digest] = descriptor
        if descriptor.media_type in defaults.manifest_media_types:
            self._index_referrer(descriptor, data)

    def _index_referrer(self, descriptor: Descriptor, data: bytes):
        manifest = json.loads(data)
        subject = manifest.get("subject")
        if not subject:
            return
        referrer = referrer_descriptor(descriptor, manifest)
        self._referrers.setdefault(subject["digest"], {})[referrer.digest] = referrer
        logger.debug(f"{descriptor.digest} indexed as referrer of {subject['digest']}")

    def exists(self, descriptor: Descriptor) -> bool:
        data = self._content.get(descriptor.digest)
        return data is not None and len(data) == descriptor.size

    def fetch(self, descriptor: Descriptor) -> bytes:
        if not self.exists(descriptor):
            raise NotFoundError(f"{descriptor.digest}: not found")
        return self._content[descriptor.digest]

    def tag(self, descriptor: Descriptor, reference: str):
        if not self.exists(descriptor):
            raise NotFoundError(f"{descriptor.digest}: not found, can not tag {reference}")
        self._tags[reference] = descriptor

    def resolve(self, reference: str) -> Descriptor:
        if reference in self._tags:
            return self._tags[reference]
        if reference in self._descriptors:
            return self._descriptors[reference]
        raise NotFoundError(f"{reference}: not found")

    def referrers(
        self, descriptor: Descriptor, artifact_type: Optional[str] = None
    ) -> List[Descriptor]:
        found = self._referrers.get(descriptor.digest, {}).values()
        return [
            d for d in found if artifact_type is None or d.artifact_type == artifact_type
        ]
