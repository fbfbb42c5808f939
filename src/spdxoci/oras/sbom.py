import copy
import json
import logging
from dataclasses import dataclass, field
from typing import Any, BinaryIO, List, Optional, Tuple

import jsonschema
from packageurl import PackageURL

from spdxoci.exceptions import SBOMParseError
from spdxoci.oras import defaults
from spdxoci.oras.artifact import (
    LoadOptions,
    load_artifact_from_file,
    load_artifact_from_reader,
)
from spdxoci.oras.descriptor import Descriptor
from spdxoci.oras.schemas import EmptySummary
from spdxoci.oras.schemas import spdxDocument as spdxDocumentSchema

logger = logging.getLogger(__name__)

package_manager_categories = ("PACKAGE-MANAGER", "PACKAGE_MANAGER")


@dataclass(frozen=True)
class Creator:
    creator_type: str
    creator: str

    def __str__(self):
        if not self.creator_type:
            return self.creator
        return f"{self.creator_type}: {self.creator}"


@dataclass
class CreationInfo:
    created: str = ""
    creators: List[Creator] = field(default_factory=list)


@dataclass
class ExternalReference:
    category: str
    reference_type: str
    locator: str


@dataclass
class Package:
    name: str
    version: str = ""
    license_declared: str = ""
    external_references: List[ExternalReference] = field(default_factory=list)


@dataclass
class File:
    name: str


@dataclass
class Document:
    name: str = ""
    namespace: str = ""
    spdx_id: str = ""
    spdx_version: str = ""
    creation_info: Optional[CreationInfo] = None
    packages: List[Package] = field(default_factory=list)
    files: List[File] = field(default_factory=list)


@dataclass
class SPDXDocument:
    """
    A loaded SBOM: the SPDX version as found in the raw JSON plus the
    structured document.
    """

    version: str
    document: Document


def _string(d: dict, key: str) -> str:
    value = d.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _objects(d: dict, key: str) -> List[dict]:
    value = d.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def parse_creator(value: str) -> Creator:
    """Split "Tool: name-1.0" into its creator type and identity."""
    creator_type, sep, identity = value.partition(":")
    if not sep:
        return Creator("", value.strip())
    return Creator(creator_type.strip(), identity.strip())


def _build_document(raw: dict) -> Document:
    doc = Document(
        name=_string(raw, "name"),
        namespace=_string(raw, "documentNamespace"),
        spdx_id=_string(raw, "SPDXID"),
        spdx_version=_string(raw, "spdxVersion"),
    )

    creation_info = raw.get("creationInfo")
    if isinstance(creation_info, dict):
        creators = creation_info.get("creators")
        if not isinstance(creators, list):
            creators = []
        doc.creation_info = CreationInfo(
            created=_string(creation_info, "created"),
            creators=[parse_creator(str(c)) for c in creators],
        )

    for pkg in _objects(raw, "packages"):
        doc.packages.append(
            Package(
                name=_string(pkg, "name"),
                version=_string(pkg, "versionInfo"),
                license_declared=_string(pkg, "licenseDeclared"),
                external_references=[
                    ExternalReference(
                        category=_string(ref, "referenceCategory"),
                        reference_type=_string(ref, "referenceType"),
                        locator=_string(ref, "referenceLocator"),
                    )
                    for ref in _objects(pkg, "externalRefs")
                ],
            )
        )

    for f in _objects(raw, "files"):
        doc.files.append(File(name=_string(f, "fileName")))

    return doc


def get_spdx_version(raw: Any) -> str:
    """
    Read spdxVersion straight from the decoded JSON.

    This does not depend on the document being schema compliant, which keeps
    version reporting working for permissive parsing.
    """
    if not isinstance(raw, dict):
        raise SBOMParseError("SPDX document must be a JSON object")
    version = raw.get("spdxVersion")
    if not isinstance(version, str) or not version:
        raise SBOMParseError("SPDX document does not contain a spdxVersion field")
    return version


def parse_sbom(data: bytes, strict: bool = True) -> SPDXDocument:
    """
    Parse SPDX JSON bytes.

    :param data: raw document
    :param strict: validate against the SPDX schema. When False, any JSON
        object with a spdxVersion field is accepted and missing fields are left
        empty in the structured document.
    """
    try:
        raw = json.loads(data)
    except ValueError as e:
        raise SBOMParseError(f"error parsing SPDX JSON: {e}") from e

    version = get_spdx_version(raw)

    if strict:
        try:
            jsonschema.validate(raw, schema=spdxDocumentSchema)
        except jsonschema.ValidationError as e:
            location = "/".join(str(p) for p in e.absolute_path) or "document"
            raise SBOMParseError(
                f"SPDX document is not valid at {location}: {e.message}"
            ) from e
    else:
        logger.debug("strict SPDX validation disabled, using plain JSON parsing")

    return SPDXDocument(version=version, document=_build_document(raw))


def load_sbom_from_reader(
    reader: BinaryIO, strict: bool = True, options: Optional[LoadOptions] = None
) -> Tuple[SPDXDocument, Descriptor, bytes]:
    desc, sbom_bytes = load_artifact_from_reader(
        reader, defaults.media_type_spdx, options
    )
    return parse_sbom(sbom_bytes, strict), desc, sbom_bytes


def load_sbom_from_file(
    path: str, strict: bool = True
) -> Tuple[SPDXDocument, Descriptor, bytes]:
    """
    Load an SPDX document from `path`.

    The descriptor carries the base name of `path` as title annotation.
    """
    desc, sbom_bytes = load_artifact_from_file(path, defaults.media_type_spdx)
    return parse_sbom(sbom_bytes, strict), desc, sbom_bytes


def get_files(doc: Document) -> List[str]:
    return [f.name for f in doc.files]


def get_packages(doc: Document) -> List[str]:
    """Return the locators of all external references of all packages."""
    return [
        ref.locator for pkg in doc.packages for ref in pkg.external_references
    ]


def get_package_manager(external_references: List[ExternalReference]) -> str:
    """
    Return the package-url type (npm, pypi, ...) of the first package manager
    purl reference, or an empty string if there is none.
    """
    for ref in external_references:
        if ref.category in package_manager_categories and ref.reference_type == "purl":
            try:
                return PackageURL.from_string(ref.locator).type
            except ValueError as e:
                raise ValueError(
                    f"error parsing package url for {ref.locator}: {e}"
                ) from e
    return ""


def get_package_summary(pkg: Package) -> dict:
    try:
        package_manager = get_package_manager(pkg.external_references)
    except ValueError as e:
        logger.warning(f"{e}, package manager of {pkg.name} left empty")
        package_manager = ""
    return {
        "name": pkg.name,
        "version": pkg.version,
        "license": pkg.license_declared,
        "packageManager": package_manager,
    }


def get_package_summaries(doc: Document) -> List[dict]:
    return [get_package_summary(pkg) for pkg in doc.packages]


def get_sbom_summary(doc: Document) -> dict:
    summary = copy.deepcopy(EmptySummary)
    summary["sbomSummary"]["files"] = get_files(doc)
    summary["sbomSummary"]["packages"] = get_package_summaries(doc)
    return summary
