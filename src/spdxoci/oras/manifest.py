import copy
import json
import logging
from typing import List, Mapping, Optional

import jsonschema
from oras.schemas import manifest as oras_manifest_schema

from spdxoci.exceptions import ManifestError, NotFoundError, SubjectNotFoundError
from spdxoci.oras import defaults
from spdxoci.oras.descriptor import Descriptor, EmptyJSON, describe
from spdxoci.oras.schemas import EmptyManifest
from spdxoci.oras.store import ContentStore

logger = logging.getLogger(__name__)


def NewManifest(
    artifact_type: str,
    layers: List[Descriptor],
    annotations: Optional[Mapping[str, str]] = None,
    subject: Optional[Descriptor] = None,
) -> dict:
    """
    Build an OCI image manifest (v1.1 artifact flavour) with the empty config.
    For reference see https://github.com/opencontainers/image-spec/blob/main/manifest.md
    """
    manifest = copy.deepcopy(EmptyManifest)
    manifest["artifactType"] = artifact_type
    manifest["config"] = EmptyJSON.to_dict()
    manifest["layers"] = [layer.to_dict() for layer in layers]
    if subject is not None:
        manifest["subject"] = {
            "mediaType": subject.media_type,
            "digest": subject.digest,
            "size": subject.size,
        }
    if annotations:
        manifest["annotations"] = dict(annotations)
    return manifest


def pack_manifest(
    store: ContentStore,
    artifact_type: str,
    layers: List[Descriptor],
    annotations: Optional[Mapping[str, str]] = None,
    subject: Optional[Descriptor] = None,
    subject_store: Optional[ContentStore] = None,
) -> Descriptor:
    """
    Pack `layers` into a manifest and write it into `store`.

    The manifest is not tagged. `annotations` go on the manifest, not on the
    layers. When `subject` is given, the manifest becomes a referrer of it and
    the subject has to be present in `subject_store` (defaults to `store`).
    Without layers, the empty descriptor is used as single layer.

    :return: descriptor of the stored manifest
    """
    if not artifact_type:
        raise ManifestError("an artifact type is required to pack a manifest")

    for layer in layers:
        if not store.exists(layer):
            raise NotFoundError(f"layer {layer.digest} is not present in the store")

    if subject is not None:
        if subject_store is None:
            subject_store = store
        if not subject_store.exists(subject):
            raise SubjectNotFoundError(f"subject not present: {subject.digest}")

    store.push(EmptyJSON, defaults.empty_json)
    if not layers:
        layers = [EmptyJSON]

    manifest = NewManifest(artifact_type, layers, annotations, subject)
    jsonschema.validate(manifest, schema=oras_manifest_schema)

    manifest_bytes = json.dumps(manifest).encode("utf-8")
    manifest_desc = describe(manifest_bytes, defaults.media_type_manifest)
    store.push(manifest_desc, manifest_bytes)
    logger.debug(f"packed {artifact_type} manifest {manifest_desc.digest}")

    return Descriptor(
        media_type=manifest_desc.media_type,
        digest=manifest_desc.digest,
        size=manifest_desc.size,
        annotations=manifest.get("annotations"),
        artifact_type=artifact_type,
    )
