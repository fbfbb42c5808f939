import hashlib
import re
from typing import Tuple

from spdxoci.exceptions import DigestMismatchError

digest_regex = re.compile(r"^(?P<algorithm>[a-z0-9]+(?:[+._-][a-z0-9]+)*):(?P<encoded>[a-zA-Z0-9=_-]+)$")
sha256_hex_regex = re.compile(r"^[a-f0-9]{64}$")


def calculate_sha256(data: bytes) -> str:
    """Calculate the OCI digest (sha256:<hex>) of a byte sequence."""
    return f"sha256:{hashlib.sha256(data).hexdigest()}"


def verify_sha256(checksum: str, data: bytes):
    data_checksum = calculate_sha256(data)
    if checksum != data_checksum:
        raise DigestMismatchError(f"Invalid checksum. {checksum} != {data_checksum}")


def split_digest(digest: str) -> Tuple[str, str]:
    """
    Split a digest into algorithm and encoded hash.

    Only sha256 digests are accepted, as these are the only ones computed here.
    """
    match = digest_regex.match(digest)
    if match is None:
        raise ValueError(f"invalid digest format: {digest}")
    algorithm = match.group("algorithm")
    encoded = match.group("encoded")
    if algorithm != "sha256":
        raise ValueError(f"unsupported digest algorithm: {algorithm}")
    if not sha256_hex_regex.match(encoded):
        raise ValueError(f"invalid sha256 digest: {digest}")
    return algorithm, encoded


def is_digest(reference: str) -> bool:
    return digest_regex.match(reference) is not None
