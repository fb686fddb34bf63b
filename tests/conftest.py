"""
Coolify Worker Test Fixtures
============================

Shared fixtures for all test modules.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest


# ============================================
# CONFIG
# ============================================

@pytest.fixture
def coolify_config():
    """Control-plane config with dummy values."""
    from coolify_worker.config import CoolifyConfig

    return CoolifyConfig(
        api_url="https://coolify.test/",
        api_token="token-test",
        server_uuid="srv-1",
        environment_name="production",
    )


@pytest.fixture
def worker_config(coolify_config):
    """Worker config with dummy values."""
    from coolify_worker.config import SiteImageConfig, StorageConfig, WorkerConfig

    return WorkerConfig(
        coolify=coolify_config,
        storage=StorageConfig(
            public_endpoint="https://s3.test",
            bucket="sites-test",
        ),
        site_image=SiteImageConfig(
            repository="https://git.test/nginx-proxy",
            branch="main",
        ),
        log_format="text",
    )


# ============================================
# FAKE CONTROL PLANE
# ============================================

class FakeCoolify:
    """
    In-process Coolify API served through httpx.MockTransport.

    Records every request. Individual routes can be made to fail with
    ``fail(method, path, status)``; paths are relative to /api/v1.
    """

    PREFIX = "/api/v1"

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.projects: List[Dict[str, Any]] = []
        self.failures: Dict[Tuple[str, str], int] = {}
        self.app_response: Optional[Any] = {"uuid": "app-1"}
        self.project_response: Optional[Any] = None
        self.unreachable = False
        self._project_seq = 0

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def calls(self) -> List[Tuple[str, str]]:
        return [(r.method, self._relative(r)) for r in self.requests]

    def fail(self, method: str, path: str, status: int = 500):
        self.failures[(method, path)] = status

    def body_of(self, method: str, path: str) -> Any:
        for request in self.requests:
            if request.method == method and self._relative(request) == path:
                return json.loads(request.content)
        raise AssertionError(f"No {method} {path} request recorded")

    def _relative(self, request: httpx.Request) -> str:
        path = request.url.path
        if path.startswith(self.PREFIX):
            path = path[len(self.PREFIX):]
        return path

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)

        method = request.method
        path = self._relative(request)

        status = self.failures.get((method, path))
        if status is not None:
            return httpx.Response(status, json={"message": f"forced failure {status}"})

        if path == "/version" and method == "GET":
            return httpx.Response(200, text="4.0.0-beta.400")

        if path == "/projects" and method == "GET":
            return httpx.Response(200, json=self.projects)

        if path == "/projects" and method == "POST":
            if self.project_response is not None:
                return httpx.Response(201, json=self.project_response)
            body = json.loads(request.content)
            self._project_seq += 1
            project = {"uuid": f"proj-{self._project_seq}", **body}
            self.projects.append(project)
            return httpx.Response(201, json={"uuid": project["uuid"]})

        if path == "/applications/public" and method == "POST":
            return httpx.Response(201, json=self.app_response)

        parts = path.strip("/").split("/")
        if parts[0] == "applications" and len(parts) >= 2:
            if len(parts) == 4 and parts[2:] == ["envs", "bulk"] and method == "PATCH":
                return httpx.Response(201, json={"message": "Environment variables updated."})
            if len(parts) == 2 and method == "PATCH":
                return httpx.Response(200, json={"uuid": parts[1]})
            if len(parts) == 2 and method == "DELETE":
                return httpx.Response(200, json={"message": "Application deletion request queued."})
            if len(parts) == 3 and parts[2] in ("start", "stop", "restart") and method == "POST":
                return httpx.Response(200, json={"message": f"{parts[2]} request queued."})

        return httpx.Response(404, json={"message": "Not found."})


@pytest.fixture
def fake_coolify():
    """A fresh fake control plane."""
    return FakeCoolify()


@pytest.fixture
def client(coolify_config, fake_coolify):
    """CoolifyClient wired to the fake control plane."""
    from coolify_worker.client import CoolifyClient

    return CoolifyClient(coolify_config, transport=fake_coolify.transport)


@pytest.fixture
def worker(worker_config, fake_coolify):
    """CoolifyWorker wired to the fake control plane."""
    from coolify_worker.worker import CoolifyWorker

    return CoolifyWorker(worker_config, transport=fake_coolify.transport)


@pytest.fixture
def registry(worker):
    """Command registry over the fake-backed worker."""
    from coolify_worker.commands import build_registry

    return build_registry(worker)
