"""
OCI content descriptors.

For reference see https://github.com/opencontainers/image-spec/blob/main/descriptor.md
"""

import dataclasses
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from spdxoci.oras import defaults
from spdxoci.oras.crypto import calculate_sha256, split_digest


@dataclass(frozen=True)
class Descriptor:
    """
    Immutable description of a blob: media type, digest, size and annotations.

    Two descriptors point at the same content when their identity
    (digest, size, media type) is equal. Annotations and the artifact type
    are informational and do not take part in content addressing.
    """

    media_type: str
    digest: str
    size: int
    annotations: Optional[Mapping[str, str]] = None
    artifact_type: Optional[str] = None

    def __post_init__(self):
        split_digest(self.digest)
        if self.size < 0:
            raise ValueError(f"invalid size {self.size} for {self.digest}")
        if self.annotations is not None:
            object.__setattr__(self, "annotations", dict(self.annotations))

    @property
    def identity(self) -> Tuple[str, int, str]:
        return self.digest, self.size, self.media_type

    @property
    def title(self) -> str:
        if not self.annotations:
            return ""
        return self.annotations.get(defaults.annotation_title, "")

    def with_annotations(self, annotations: Mapping[str, str]) -> "Descriptor":
        """Return a copy with `annotations` merged over the existing ones."""
        merged = dict(self.annotations or {})
        merged.update(annotations)
        return dataclasses.replace(self, annotations=merged)

    def with_title(self, name: Optional[str]) -> "Descriptor":
        """
        Return a copy carrying `name` as title annotation.

        An existing non-empty title is never replaced and an empty name
        leaves the descriptor untouched.
        """
        if not name or self.title:
            return self
        return self.with_annotations({defaults.annotation_title: name})

    def to_dict(self) -> dict:
        d = {
            "mediaType": self.media_type,
            "digest": self.digest,
            "size": self.size,
        }
        if self.annotations:
            d["annotations"] = dict(self.annotations)
        if self.artifact_type:
            d["artifactType"] = self.artifact_type
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Descriptor":
        return cls(
            media_type=d["mediaType"],
            digest=d["digest"],
            size=int(d["size"]),
            annotations=d.get("annotations") or None,
            artifact_type=d.get("artifactType") or None,
        )


def describe(data: bytes, media_type: str) -> Descriptor:
    """Build the descriptor of `data`. No annotations are attached."""
    return Descriptor(
        media_type=media_type,
        digest=calculate_sha256(data),
        size=len(data),
    )


EmptyJSON = Descriptor(
    media_type=defaults.media_type_empty,
    digest=defaults.empty_json_digest,
    size=len(defaults.empty_json),
)
