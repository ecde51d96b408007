# Fixtures for the HTTP / WebSocket layer: an in-process TestClient per test,
# plus a real uvicorn server for smoke checks.

import logging
import os
import socket
import subprocess
import sys
import time
from collections.abc import Iterator
from contextlib import closing
from pathlib import Path

import pytest
import requests
from fastapi.testclient import TestClient

from skirmish.app import create_app
from skirmish.config import RulesConfig
from skirmish.events import EventBus

ROOT = Path(__file__).resolve().parents[2]
logger = logging.getLogger(__name__)


def _get_free_port(host: str = "127.0.0.1") -> int:
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return s.getsockname()[1]


@pytest.fixture()
def client() -> Iterator[TestClient]:
    app = create_app(RulesConfig(), EventBus())
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="session")
def base_url() -> Iterator[str]:
    env = os.environ.copy()
    env.setdefault("SKIRMISH_BOARD_SIZE", "5")
    port = _get_free_port()

    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        "skirmish.app:app",
        "--host",
        "127.0.0.1",
        "--port",
        str(port),
        "--log-level",
        "warning",
    ]
    proc = subprocess.Popen(
        cmd,
        cwd=str(ROOT),
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    logger.info("[tests] Started uvicorn (pid=%s) on port %s", proc.pid, port)

    url = f"http://127.0.0.1:{port}"
    for _ in range(120):
        try:
            r = requests.get(url + "/health", timeout=1.0)
            if r.status_code == 200:
                break
        except requests.RequestException:
            pass
        if proc.poll() is not None:
            out, err = proc.communicate(timeout=2)
            raise RuntimeError(
                f"Server exited early (code={proc.returncode}). STDOUT:\n{out}\nSTDERR:\n{err}"
            )
        time.sleep(0.25)
    else:
        proc.terminate()
        try:
            out, err = proc.communicate(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()
            out, err = ("", "")
        raise RuntimeError(f"Server did not start in time. STDOUT:\n{out}\nSTDERR:\n{err}")

    try:
        yield url
    finally:
        proc.terminate()
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()
