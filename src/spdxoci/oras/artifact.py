import logging
import re
from dataclasses import dataclass
from typing import BinaryIO, Optional, Tuple

from spdxoci.exceptions import ArtifactLoadError
from spdxoci.oras.descriptor import Descriptor, describe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadOptions:
    """
    Optional inputs for loading an artifact from bytes or a stream.

    filename: display name stored in the title annotation of the descriptor.
    """

    filename: Optional[str] = None


def base_name(path: str) -> str:
    """
    Return the last component of `path`.

    Both / and \\ are treated as separators, so Windows paths resolve the same
    on every platform.
    """
    return re.split(r"[/\\]", path)[-1]


def load_artifact_from_bytes(
    data: bytes, media_type: str, options: Optional[LoadOptions] = None
) -> Descriptor:
    desc = describe(data, media_type)
    if options is not None:
        desc = desc.with_title(options.filename)
    return desc


def load_artifact_from_reader(
    reader: BinaryIO, media_type: str, options: Optional[LoadOptions] = None
) -> Tuple[Descriptor, bytes]:
    """Read the whole stream and describe it. The reader is closed afterwards."""
    with reader:
        data = reader.read()
    return load_artifact_from_bytes(data, media_type, options), data


def load_artifact_from_file(path: str, media_type: str) -> Tuple[Descriptor, bytes]:
    logger.debug(f"loading artifact {path} as {media_type}")
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ArtifactLoadError(f"error loading artifact from file: {e}") from e
    desc = load_artifact_from_bytes(
        data, media_type, LoadOptions(filename=base_name(path))
    )
    return desc, data
