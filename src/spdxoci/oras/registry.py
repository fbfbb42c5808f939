import json
import logging
from typing import List, Optional
from urllib.parse import quote

import requests
from oras.provider import Registry

from spdxoci.exceptions import NotFoundError
from spdxoci.oras import defaults
from spdxoci.oras.credentials import CredentialResolver
from spdxoci.oras.crypto import calculate_sha256, verify_sha256
from spdxoci.oras.descriptor import Descriptor
from spdxoci.oras.reference import Reference
from spdxoci.oras.store import ContentStore

logger = logging.getLogger(__name__)


def use_plain_http(registry: str) -> bool:
    """localhost registries are reached over plain HTTP, everything else via TLS."""
    return registry == defaults.plain_http_host or registry.startswith(
        f"{defaults.plain_http_host}:"
    )


class RegistryStore(Registry, ContentStore):
    """
    A repository of a remote OCI registry, used as destination of a copy.

    All requests go through oras' do_request, which handles token
    authentication and retries.
    """

    def __init__(
        self,
        reference: Reference,
        credential_resolver: Optional[CredentialResolver] = None,
        user_agent: str = defaults.user_agent,
        insecure: Optional[bool] = None,
    ):
        if insecure is None:
            insecure = use_plain_http(reference.registry)
        super().__init__(auth_backend="token", insecure=insecure)
        self.reference = reference
        self.user_agent = user_agent
        self.session.headers.update({"User-Agent": user_agent})
        if credential_resolver is not None:
            credential = credential_resolver.resolve(reference.registry)
            if credential:
                self.auth.set_basic_auth(credential.username, credential.password)
            else:
                logger.debug(f"No credentials for {reference.registry}, using anonymous access")

    @property
    def repository_url(self) -> str:
        return f"{self.prefix}://{self.reference.registry}/v2/{self.reference.repository}"

    def manifest_url(self, reference: str) -> str:
        return f"{self.repository_url}/manifests/{reference}"

    def blob_url(self, digest: str) -> str:
        return f"{self.repository_url}/blobs/{digest}"

    def _content_url(self, descriptor: Descriptor) -> str:
        if descriptor.media_type in defaults.manifest_media_types:
            return self.manifest_url(descriptor.digest)
        return self.blob_url(descriptor.digest)

    def exists(self, descriptor: Descriptor) -> bool:
        headers = {}
        if descriptor.media_type in defaults.manifest_media_types:
            headers["Accept"] = descriptor.media_type
        response = self.do_request(self._content_url(descriptor), "HEAD", headers=headers)
        if response.status_code == 404:
            return False
        self._check_200_response(response)
        return True

    def fetch(self, descriptor: Descriptor) -> bytes:
        headers = {}
        if descriptor.media_type in defaults.manifest_media_types:
            headers["Accept"] = descriptor.media_type
        response = self.do_request(self._content_url(descriptor), "GET", headers=headers)
        if response.status_code == 404:
            raise NotFoundError(f"{descriptor.digest}: not found in {self.reference.repository_uri}")
        self._check_200_response(response)
        verify_sha256(descriptor.digest, response.content)
        return response.content

    def push(self, descriptor: Descriptor, data: bytes):
        verify_sha256(descriptor.digest, data)
        if descriptor.media_type in defaults.manifest_media_types:
            self._check_200_response(self._put_manifest(descriptor.digest, descriptor.media_type, data))
            return
        if self.exists(descriptor):
            logger.debug(f"blob {descriptor.digest} already exists, skipping upload")
            return
        self._check_200_response(self._upload_blob(descriptor, data))

    def _put_manifest(self, reference: str, media_type: str, data: bytes) -> requests.Response:
        headers = {
            "Content-Type": media_type,
            "Content-Length": str(len(data)),
        }
        return self.do_request(self.manifest_url(reference), "PUT", headers=headers, data=data)

    def _upload_blob(self, descriptor: Descriptor, data: bytes) -> requests.Response:
        """
        Monolithic upload: POST for an upload session, then a single PUT.
        For reference see https://github.com/opencontainers/distribution-spec/blob/main/spec.md#post-then-put
        """
        response = self.do_request(f"{self.repository_url}/blobs/uploads/", "POST")
        self._check_200_response(response)
        location = response.headers.get("Location")
        if not location:
            raise ValueError(f"Registry did not return an upload location for {descriptor.digest}")
        if location.startswith("/"):
            location = f"{self.prefix}://{self.reference.registry}{location}"
        separator = "&" if "?" in location else "?"
        headers = {
            "Content-Type": "application/octet-stream",
            "Content-Length": str(descriptor.size),
        }
        return self.do_request(
            f"{location}{separator}digest={descriptor.digest}",
            "PUT",
            headers=headers,
            data=data,
        )

    def tag(self, descriptor: Descriptor, reference: str):
        data = self.fetch(descriptor)
        self._check_200_response(self._put_manifest(reference, descriptor.media_type, data))
        logger.debug(f"tagged {descriptor.digest} as {self.reference.repository_uri}:{reference}")

    def resolve(self, reference: str) -> Descriptor:
        headers = {"Accept": ", ".join(defaults.manifest_media_types)}
        response = self.do_request(self.manifest_url(reference), "GET", headers=headers)
        if response.status_code == 404:
            raise NotFoundError(f"{reference}: not found in {self.reference.repository_uri}")
        self._check_200_response(response)
        media_type = response.headers.get("Content-Type", defaults.media_type_manifest).split(";")[0].strip()
        digest = response.headers.get("Docker-Content-Digest") or calculate_sha256(response.content)
        return Descriptor(media_type=media_type, digest=digest, size=len(response.content))

    def referrers(self, descriptor: Descriptor, artifact_type: Optional[str] = None) -> List[Descriptor]:
        """
        Query the referrers API. Registries without referrers support answer
        404, which is reported as no referrers.
        """
        url = f"{self.repository_url}/referrers/{descriptor.digest}"
        if artifact_type:
            url = f"{url}?artifactType={quote(artifact_type, safe='')}"
        response = self.do_request(url, "GET", headers={"Accept": defaults.media_type_index})
        if response.status_code == 404:
            logger.debug(f"No referrers API for {self.reference.repository_uri}")
            return []
        self._check_200_response(response)
        index = json.loads(response.content)
        found = [Descriptor.from_dict(m) for m in index.get("manifests", [])]
        return [d for d in found if artifact_type is None or d.artifact_type == artifact_type]
