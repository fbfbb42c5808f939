from typing import Dict, Iterable, Mapping

from spdxoci.exceptions import AnnotationFormatError, DuplicateAnnotationError
from spdxoci.oras import defaults
from spdxoci.oras.sbom import Document


def get_annotations(doc: Document) -> Dict[str, str]:
    """
    Project the SPDX document fields onto OCI manifest annotations.

    Creators are rendered as "<type>: <identity>" and joined with ", " in
    document order. A document without creation info yields empty values.
    """
    created = ""
    creators = []
    if doc.creation_info is not None:
        created = doc.creation_info.created
        creators = [str(c) for c in doc.creation_info.creators]

    return {
        defaults.annotation_document_name: doc.name,
        defaults.annotation_document_namespace: doc.namespace,
        defaults.annotation_spdx_version: doc.spdx_version,
        defaults.annotation_creation_date: created,
        defaults.annotation_creators: ", ".join(creators),
    }


def parse_annotation_flags(flags: Iterable[str]) -> Dict[str, str]:
    """
    Parse key=value annotation flags.

    The value may contain further "=" characters. A flag without a key or "=",
    and a key given twice, are rejected.
    """
    annotations: Dict[str, str] = {}
    for flag in flags:
        key, sep, value = flag.partition("=")
        if not sep or not key:
            raise AnnotationFormatError(f"missing key in `--annotation` flag: {flag}")
        if key in annotations:
            raise DuplicateAnnotationError(f"duplicate annotation key: {key}")
        annotations[key] = value
    return annotations


def merge_annotations(
    base: Mapping[str, str], overlay: Mapping[str, str]
) -> Dict[str, str]:
    """Return a new map with `overlay` entries replacing those of `base`."""
    merged = dict(base)
    merged.update(overlay)
    return merged
