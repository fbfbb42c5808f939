import json

import pytest
import yaml
from click.testing import CliRunner

from spdxoci.cli import cli
from spdxoci.oras import defaults
from spdxoci.oras.store import MemoryStore

from .helper import EXAMPLE_ARTIFACT, EXAMPLE_SBOM


@pytest.fixture(autouse=True)
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.ini"
    monkeypatch.setenv("SPDXOCI_CONFIG", str(path))
    return path


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def dest(monkeypatch):
    store = MemoryStore()
    monkeypatch.setattr(
        "spdxoci.commands.push.connect_repository", lambda *args, **kwargs: store
    )
    return store


def test_show_text(runner):
    result = runner.invoke(cli, ["show", "-f", EXAMPLE_SBOM])

    assert result.exit_code == 0, result.output
    assert "SPDX-Tools-v2.0" in result.output
    assert "SPDX-2.3" in result.output
    assert "Creators:" in result.output
    assert "sha256:" in result.output


def test_show_json(runner):
    result = runner.invoke(cli, ["show", "-f", EXAMPLE_SBOM, "--format", "json"])

    assert result.exit_code == 0, result.output
    summary = json.loads(result.output)
    assert summary["name"] == "SPDX-Tools-v2.0"
    assert summary["packages"] == 3
    assert summary["files"] == 2
    assert len(summary["creators"]) == 3


def test_show_yaml(runner):
    result = runner.invoke(cli, ["show", "-f", EXAMPLE_SBOM, "--format", "yaml"])

    assert result.exit_code == 0, result.output
    summary = yaml.safe_load(result.output)
    assert summary["spdxVersion"] == "SPDX-2.3"
    assert summary["digest"].startswith("sha256:")


def test_show_non_compliant(runner, tmp_path, non_compliant_spdx_bytes):
    sbom = tmp_path / "non-compliant.spdx.json"
    sbom.write_bytes(non_compliant_spdx_bytes)

    result = runner.invoke(cli, ["show", "-f", str(sbom)])
    assert result.exit_code == 1
    assert "Error loading SBOM" in result.output

    result = runner.invoke(cli, ["show", "-f", str(sbom), "--no-strict"])
    assert result.exit_code == 0, result.output
    assert "SPDX-Example" in result.output


def test_files(runner):
    result = runner.invoke(cli, ["files", "-f", EXAMPLE_SBOM])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "./src/org/spdx/parser/DOAPProject.java",
        "./lib-source/commons-lang3-3.1-sources.jar",
    ]


def test_packages(runner):
    result = runner.invoke(cli, ["packages", "-f", EXAMPLE_SBOM])

    assert result.exit_code == 0, result.output
    assert "pkg:deb/debian/glibc@2.11.1" in result.output.splitlines()


def test_files_missing_sbom(runner, tmp_path):
    result = runner.invoke(cli, ["files", "-f", str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    assert "Error loading SBOM" in result.output


def test_push(runner, dest):
    result = runner.invoke(
        cli,
        ["push", "-f", EXAMPLE_SBOM, "localhost:5000/spdx:v1", "-a", "org.example.team=security"],
    )

    assert result.exit_code == 0, result.output
    manifest_desc = dest.resolve("v1")
    assert f"SBOM pushed to localhost:5000/spdx:v1@{manifest_desc.digest}" in result.output

    manifest = json.loads(dest.fetch(manifest_desc))
    assert manifest["annotations"]["org.example.team"] == "security"
    assert manifest["annotations"][defaults.annotation_document_name] == "SPDX-Tools-v2.0"
    assert len(manifest["layers"]) == 1


def test_push_with_summary_and_attachment(runner, dest):
    result = runner.invoke(
        cli,
        [
            "push",
            "-f",
            EXAMPLE_SBOM,
            "localhost:5000/spdx",
            "--push-summary",
            "-t",
            f"application/vnd.example.json={EXAMPLE_ARTIFACT}",
        ],
    )

    assert result.exit_code == 0, result.output
    manifest_desc = dest.resolve("latest")
    manifest = json.loads(dest.fetch(manifest_desc))
    assert len(manifest["layers"]) == 2

    referrers = dest.referrers(manifest_desc)
    assert len(referrers) == 1
    assert f"Attached {EXAMPLE_ARTIFACT} (application/vnd.example.json)" in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["localhost:5000/spdx", "-a", "novalue"],
        ["localhost:5000/spdx", "-a", "a=1", "-a", "a=2"],
        ["localhost:5000/spdx", "-t", "application/vnd.example.json"],
        ["not a reference"],
    ],
)
def test_push_invalid_arguments(runner, dest, args):
    result = runner.invoke(cli, ["push", "-f", EXAMPLE_SBOM] + args)

    assert result.exit_code == 1
    assert "Error parsing arguments" in result.output
    assert len(dest) == 0


def test_push_missing_sbom(runner, dest, tmp_path):
    result = runner.invoke(cli, ["push", "-f", str(tmp_path / "missing.json"), "localhost:5000/spdx"])

    assert result.exit_code == 1
    assert "Error loading SBOM" in result.output
    assert len(dest) == 0


def test_push_missing_attachment(runner, dest, tmp_path):
    missing = str(tmp_path / "missing.sig")

    result = runner.invoke(
        cli,
        ["push", "-f", EXAMPLE_SBOM, "localhost:5000/spdx", "-t", f"application/vnd.example.sig={missing}"],
    )

    assert result.exit_code == 1
    assert "Error pushing SBOM" in result.output
    assert missing in result.output
    assert dest.resolve("latest")


def test_config_set_and_show(runner, config_file, tmp_path):
    docker_config = str(tmp_path / "docker.json")

    result = runner.invoke(
        cli,
        ["config", "set", "--user-agent", "spdxoci-test", "--docker-config", docker_config, "--no-strict"],
    )
    assert result.exit_code == 0, result.output
    assert config_file.exists()

    result = runner.invoke(cli, ["config", "show"])
    assert result.exit_code == 0, result.output
    assert f"Config File: {config_file}" in result.output
    assert "User Agent: spdxoci-test" in result.output
    assert f"Docker Config: {docker_config}" in result.output
    assert "Strict: False" in result.output


def test_config_show_defaults(runner):
    result = runner.invoke(cli, ["config", "show"])

    assert result.exit_code == 0, result.output
    assert f"User Agent: {defaults.user_agent}" in result.output
    assert "Docker Config: Not set" in result.output
    assert "Strict: True" in result.output


def test_config_strict_default_is_used(runner, tmp_path, non_compliant_spdx_bytes):
    sbom = tmp_path / "non-compliant.spdx.json"
    sbom.write_bytes(non_compliant_spdx_bytes)

    runner.invoke(cli, ["config", "set", "--no-strict"])
    result = runner.invoke(cli, ["show", "-f", str(sbom)])

    assert result.exit_code == 0, result.output


def test_push_malformed_docker_config(runner, tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    docker_config = tmp_path / "docker.json"
    docker_config.write_text("{not json")
    runner.invoke(cli, ["config", "set", "--docker-config", str(docker_config)])

    result = runner.invoke(cli, ["push", "-f", EXAMPLE_SBOM, "localhost:5999/spdx"])

    assert result.exit_code == 1
    assert "Error connecting to registry" in result.output
    assert not isinstance(result.exception, ValueError)
