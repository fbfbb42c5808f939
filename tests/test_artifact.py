import hashlib
import io
import os

import pytest

from spdxoci.exceptions import ArtifactLoadError
from spdxoci.oras import defaults
from spdxoci.oras.artifact import (
    LoadOptions,
    base_name,
    load_artifact_from_bytes,
    load_artifact_from_file,
    load_artifact_from_reader,
)

from .helper import EXAMPLE_ARTIFACT

TEST_DATA = b'{"test": "data"}'
TEST_DATA_DIGEST = "sha256:40b61fe1b15af0a4d5402735b26343e8cf8a045f4d81710e6108a21d91eaf366"


def test_load_artifact_from_file():
    desc, data = load_artifact_from_file(EXAMPLE_ARTIFACT, "application/json")

    with open(EXAMPLE_ARTIFACT, "rb") as f:
        expected = f.read()

    assert data == expected
    assert desc.media_type == "application/json"
    assert desc.size == len(expected)
    assert desc.digest == f"sha256:{hashlib.sha256(expected).hexdigest()}"
    assert desc.annotations == {defaults.annotation_title: "artifact.example.json"}


def test_load_artifact_from_file_missing(tmp_path):
    missing = str(tmp_path / "does-not-exist.json")

    with pytest.raises(ArtifactLoadError, match="error loading artifact from file"):
        load_artifact_from_file(missing, "application/json")


def test_load_artifact_from_reader():
    reader = io.BytesIO(TEST_DATA)

    desc, data = load_artifact_from_reader(reader, "application/json")

    assert data == TEST_DATA
    assert desc.size == len(TEST_DATA)
    assert desc.digest == TEST_DATA_DIGEST
    assert desc.annotations is None
    assert reader.closed


def test_load_artifact_from_reader_with_filename():
    desc, _ = load_artifact_from_reader(
        io.BytesIO(TEST_DATA),
        "application/json",
        LoadOptions(filename="test-artifact.json"),
    )

    assert desc.title == "test-artifact.json"


@pytest.mark.parametrize("options", [None, LoadOptions(), LoadOptions(filename="")])
def test_load_artifact_from_bytes_without_filename(options):
    desc = load_artifact_from_bytes(TEST_DATA, "application/json", options)

    assert desc.digest == TEST_DATA_DIGEST
    assert not desc.annotations


@pytest.mark.parametrize(
    "path",
    [
        "../examples/x.json",
        "C:\\Windows\\System32\\x.json",
        "x.json",
        "./x.json",
    ],
)
def test_base_name(path):
    assert base_name(path) == "x.json"


@pytest.mark.parametrize("subdir", ["", "nested"])
def test_load_artifact_from_file_title_is_base_name(tmp_path, subdir):
    directory = tmp_path / subdir
    directory.mkdir(exist_ok=True)
    path = directory / "x.json"
    path.write_bytes(TEST_DATA)

    desc, _ = load_artifact_from_file(os.path.relpath(path), "application/json")

    assert desc.title == "x.json"


class _FailingReader:
    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False

    def read(self):
        raise OSError("Input/output error")


def test_load_artifact_from_file_read_error(monkeypatch):
    monkeypatch.setattr(
        "spdxoci.oras.artifact.open", lambda *args: _FailingReader(), raising=False
    )

    with pytest.raises(ArtifactLoadError, match="error loading artifact from file: Input/output error"):
        load_artifact_from_file(EXAMPLE_ARTIFACT, "application/json")
