import os
import shlex
import subprocess
import time

import requests

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
EXAMPLE_DATA_DIR = os.path.join(ROOT_DIR, "example-data")
EXAMPLE_SBOM = os.path.join(EXAMPLE_DATA_DIR, "example.spdx.json")
EXAMPLE_ARTIFACT = os.path.join(EXAMPLE_DATA_DIR, "artifact.example.json")


def spawn_background_process(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE):
    args = shlex.split(cmd)
    process = subprocess.Popen(args, shell=False, stdout=stdout, stderr=stderr)
    return process


def wait_for_registry(url: str, timeout: float = 10.0) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            if requests.get(url, timeout=1).status_code in (200, 401):
                return True
        except requests.ConnectionError:
            pass
        time.sleep(0.2)
    return False
