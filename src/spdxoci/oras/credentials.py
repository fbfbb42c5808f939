import base64
import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

import requests
from oras.auth import get_auth_backend
from oras.auth.utils import load_configs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    username: str = ""
    password: str = ""

    def __bool__(self):
        return bool(self.username or self.password)


EmptyCredential = Credential()


class CredentialResolver(ABC):
    @abstractmethod
    def resolve(self, registry: str) -> Credential:
        """Return the credential for `registry`, or EmptyCredential."""


class StaticCredentialResolver(CredentialResolver):
    """Hands out one username/password pair, for one registry only."""

    def __init__(self, registry: str, credential: Credential):
        self.registry = registry
        self.credential = credential

    def resolve(self, registry: str) -> Credential:
        if registry != self.registry:
            return EmptyCredential
        return self.credential


class DockerConfigCredentialResolver(CredentialResolver):
    """
    Looks up credentials in docker config files (~/.docker/config.json and
    any extra config files given).

    Per-registry credential helpers (`credHelpers`) win over inline `auths`
    entries, the global `credsStore` is the fallback. Helpers are run through
    oras-py's docker-credential support.
    """

    def __init__(self, configs: Optional[List[str]] = None):
        self.configs = configs

    def resolve(self, registry: str) -> Credential:
        loaded = load_configs(list(self.configs or []))
        helpers = loaded.get("credHelpers") or {}
        auths = loaded.get("auths") or {}
        keys = (registry, f"https://{registry}", f"http://{registry}")

        for key in keys:
            if key in helpers:
                return self._from_helper(helpers[key], registry)
        for key in keys:
            if key in auths:
                credential = decode_auth(auths[key])
                if credential:
                    return credential
        if loaded.get("credsStore"):
            return self._from_helper(loaded["credsStore"], registry)

        logger.debug(f"no credentials for {registry} in docker config")
        return EmptyCredential

    def _from_helper(self, helper: str, registry: str) -> Credential:
        backend = get_auth_backend("basic", requests.Session())
        try:
            auth = backend._get_auth_from_creds_store(helper, registry)
        except (RuntimeError, OSError, ValueError, subprocess.SubprocessError) as e:
            logger.debug(f"docker-credential-{helper} has no credentials for {registry}: {e}")
            return EmptyCredential
        return decode_auth({"auth": auth})


def decode_auth(entry: dict) -> Credential:
    if entry.get("username") or entry.get("password"):
        return Credential(entry.get("username", ""), entry.get("password", ""))
    auth = entry.get("auth")
    if not auth:
        return EmptyCredential
    username, _, password = base64.b64decode(auth).decode("utf-8").partition(":")
    return Credential(username, password)


def get_credential_resolver(
    registry: str,
    username: Optional[str] = None,
    password: Optional[str] = None,
    docker_config: Optional[str] = None,
) -> CredentialResolver:
    if username and password:
        return StaticCredentialResolver(registry, Credential(username, password))
    configs = [docker_config] if docker_config else None
    return DockerConfigCredentialResolver(configs)
