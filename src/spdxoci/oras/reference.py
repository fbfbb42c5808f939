import re
from dataclasses import dataclass

from spdxoci.exceptions import ReferenceFormatError
from spdxoci.oras import defaults
from spdxoci.oras.crypto import is_digest, split_digest

reference_regex = re.compile(
    r"^(?P<registry>[a-zA-Z0-9.-]+(?::[0-9]+)?)"
    r"/(?P<repository>[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*(?:/[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*)*)"
    r"(?::(?P<tag>[a-zA-Z0-9_][a-zA-Z0-9._-]{0,127}))?"
    r"(?:@(?P<digest>[^@]+))?$"
)


@dataclass(frozen=True)
class Reference:
    """
    A parsed registry reference.

    URI may be in any of the following forms:

        localhost:5000/spdx
        ghcr.io/example/sbom:1.0
        ghcr.io/example/sbom@sha256:ff81...47a

    `reference` is the tag or digest, or empty when neither was given.
    When both are given the digest wins.
    """

    registry: str
    repository: str
    reference: str = ""

    def __str__(self):
        base = f"{self.registry}/{self.repository}"
        if not self.reference:
            return base
        if is_digest(self.reference):
            return f"{base}@{self.reference}"
        return f"{base}:{self.reference}"

    @property
    def repository_uri(self) -> str:
        return f"{self.registry}/{self.repository}"

    def tag_or_default(self, default_tag: str = defaults.default_tag) -> str:
        return self.reference or default_tag

    def with_reference(self, reference: str) -> "Reference":
        return Reference(self.registry, self.repository, reference)


def parse_reference(reference: str) -> Reference:
    match = reference_regex.match(reference)
    if match is None:
        raise ReferenceFormatError(f"invalid reference: {reference}")

    digest = match.group("digest")
    if digest:
        try:
            split_digest(digest)
        except ValueError as e:
            raise ReferenceFormatError(f"invalid reference: {reference}: {e}") from e
        return Reference(match.group("registry"), match.group("repository"), digest)

    return Reference(
        match.group("registry"),
        match.group("repository"),
        match.group("tag") or "",
    )
