"""Exceptions raised by spdxoci."""


class SpdxOciError(Exception):
    """Base exception for all spdxoci operations."""


class InputError(SpdxOciError, ValueError):
    """Raised when user input is malformed, before any I/O happens."""


class ReferenceFormatError(InputError):
    """Raised when a registry reference can not be parsed."""


class AnnotationFormatError(InputError):
    """Raised when an annotation flag is not of the form key=value."""


class DuplicateAnnotationError(InputError):
    """Raised when the same annotation key is given more than once."""


class AttachFormatError(InputError):
    """Raised when an attach flag is not of the form artifactType=path."""


class ArtifactLoadError(SpdxOciError):
    """Raised when an artifact can not be read."""


class SBOMParseError(SpdxOciError):
    """Raised when an SBOM is not a valid SPDX JSON document."""


class DigestMismatchError(SpdxOciError):
    """Raised when content does not match its declared digest or size."""


class NotFoundError(SpdxOciError):
    """Raised when content or a reference is missing from a store."""


class SubjectNotFoundError(NotFoundError):
    """Raised when a referrer is packed against a subject that is not present."""


class ManifestError(SpdxOciError):
    """Raised when a manifest can not be built."""


class AttachmentError(SpdxOciError):
    """Raised when attaching an artifact to a subject fails."""

    def __init__(self, artifact_type: str, path: str, cause: Exception):
        self.artifact_type = artifact_type
        self.path = path
        self.cause = cause
        super().__init__(
            f"error attaching {path} as {artifact_type}: {cause}"
        )
