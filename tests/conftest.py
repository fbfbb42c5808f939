import json
import os
import shutil
import subprocess

import pytest

from spdxoci.oras.store import MemoryStore

from .helper import spawn_background_process, wait_for_registry

ZOT_PORT = "18081"

SPDX_STR = """{
    "SPDXID": "SPDXRef-DOCUMENT",
    "spdxVersion": "SPDX-2.2",
    "name" : "SPDX-Example",
    "documentNamespace" : "SPDX-Namespace-Example",
    "creationInfo": {
        "created": "2020-07-23T18:30:22Z",
        "creators": ["Tool: SPDX-Java-Tools-v2.1.20", "Organization: Source Auditor Inc."],
        "licenseListVersion": "3.6"
    }
}"""

NON_COMPLIANT_SPDX_STR = """{
    "SPDXID": "NonCompliant",
    "spdxVersion": "SPDX-2.2",
    "name" : "SPDX-Example",
    "documentNamespace" : "SPDX-Namespace-Example",
    "creationInfo": {
        "created": "2020-07-23T18:30:22Z",
        "creators": ["Tool: SPDX-Java-Tools-v2.1.20", "Organization: Source Auditor Inc."],
        "licenseListVersion": "3.6"
    }
}"""


def write_zot_config(config_dict, file_path):
    with open(file_path, "w") as config_file:
        json.dump(config_dict, config_file, indent=4)


@pytest.fixture
def spdx_bytes():
    return SPDX_STR.encode("utf-8")


@pytest.fixture
def non_compliant_spdx_bytes():
    return NON_COMPLIANT_SPDX_STR.encode("utf-8")


@pytest.fixture
def sbom_file(tmp_path, spdx_bytes):
    path = tmp_path / "sbom.spdx.json"
    path.write_bytes(spdx_bytes)
    return str(path)


@pytest.fixture
def mem():
    return MemoryStore()


@pytest.fixture(scope="function")
def zot_session(tmp_path):
    if shutil.which("zot") is None:
        pytest.skip("zot registry binary not available")

    print("start zot session")
    zot_config = {
        "distSpecVersion": "1.1.0",
        "storage": {"rootDirectory": str(tmp_path / "registry")},
        "http": {"address": "127.0.0.1", "port": ZOT_PORT},
        "log": {"level": "warn"},
    }
    zot_config_file_path = str(tmp_path / "zot-config.json")
    write_zot_config(zot_config, zot_config_file_path)

    print(f"Spawning zot registry with config {zot_config_file_path}")
    zot_process = spawn_background_process(
        f"zot serve {zot_config_file_path}",
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    if not wait_for_registry(f"http://127.0.0.1:{ZOT_PORT}/v2/"):
        zot_process.terminate()
        pytest.fail("zot registry did not come up")

    yield f"localhost:{ZOT_PORT}"
    print("clean up zot session")

    zot_process.terminate()
    zot_process.wait()
    if os.path.isfile(zot_config_file_path):
        os.remove(zot_config_file_path)
