"""
Tests for Application Lifecycle Operations
==========================================

Restart, domain, maintenance, delete and health.
"""

import pytest

from coolify_worker.client import CoolifyClient
from coolify_worker.config import CoolifyConfig
from coolify_worker.errors import CoolifyAPIError
from coolify_worker.services.applications import ApplicationLifecycle, normalize_domain


class TestNormalizeDomain:

    def test_bare_domain_prefixed(self):
        assert normalize_domain("example.com") == "https://example.com"

    def test_https_unchanged(self):
        assert normalize_domain("https://example.com") == "https://example.com"

    def test_http_unchanged(self):
        assert normalize_domain("http://example.com") == "http://example.com"

    def test_host_starting_with_http_prefixed(self):
        assert normalize_domain("httpshop.example.com") == "https://httpshop.example.com"
        assert normalize_domain("https-store.example.com") == "https://https-store.example.com"


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_restart(self, client, fake_coolify):
        await ApplicationLifecycle(client).restart("app-1")
        assert fake_coolify.calls == [("POST", "/applications/app-1/restart")]

    @pytest.mark.asyncio
    async def test_set_domain_prefixes_scheme(self, client, fake_coolify):
        fqdn = await ApplicationLifecycle(client).set_domain("app-1", "example.com")

        assert fqdn == "https://example.com"
        assert fake_coolify.body_of("PATCH", "/applications/app-1") == {"domains": "https://example.com"}

    @pytest.mark.asyncio
    async def test_set_domain_http_like_host(self, client, fake_coolify):
        fqdn = await ApplicationLifecycle(client).set_domain("app-1", "httpshop.example.com")

        assert fqdn == "https://httpshop.example.com"
        assert fake_coolify.body_of("PATCH", "/applications/app-1") == {"domains": "https://httpshop.example.com"}

    @pytest.mark.asyncio
    async def test_set_domain_no_double_prefix(self, client, fake_coolify):
        await ApplicationLifecycle(client).set_domain("app-1", "https://example.com")

        assert fake_coolify.body_of("PATCH", "/applications/app-1") == {"domains": "https://example.com"}

    @pytest.mark.asyncio
    async def test_maintenance_on_stops(self, client, fake_coolify):
        await ApplicationLifecycle(client).toggle_maintenance("app-1", True)
        assert fake_coolify.calls == [("POST", "/applications/app-1/stop")]

    @pytest.mark.asyncio
    async def test_maintenance_off_starts(self, client, fake_coolify):
        await ApplicationLifecycle(client).toggle_maintenance("app-1", False)
        assert fake_coolify.calls == [("POST", "/applications/app-1/start")]

    @pytest.mark.asyncio
    async def test_delete(self, client, fake_coolify):
        await ApplicationLifecycle(client).delete("app-1")
        assert fake_coolify.calls == [("DELETE", "/applications/app-1")]

    @pytest.mark.asyncio
    async def test_failure_carries_status(self, client, fake_coolify):
        fake_coolify.fail("POST", "/applications/app-1/restart", 404)

        with pytest.raises(CoolifyAPIError) as exc:
            await ApplicationLifecycle(client).restart("app-1")

        assert exc.value.status_code == 404


class TestHealth:
    """Health never raises."""

    @pytest.mark.asyncio
    async def test_up(self, client, fake_coolify):
        result = await ApplicationLifecycle(client).health()

        assert result.status == "up"
        assert result.is_up
        assert result.latency_ms >= 0
        assert fake_coolify.calls == [("GET", "/version")]

    @pytest.mark.asyncio
    async def test_unreachable_is_down(self, client, fake_coolify):
        fake_coolify.unreachable = True

        result = await ApplicationLifecycle(client).health()

        assert result.status == "down"
        assert result.latency_ms >= 0
        assert "connection refused" in result.error

    @pytest.mark.asyncio
    async def test_error_status_is_down(self, client, fake_coolify):
        fake_coolify.fail("GET", "/version", 401)

        result = await ApplicationLifecycle(client).health()

        assert result.status == "down"
        assert result.error == "coolify_api_401"

    @pytest.mark.asyncio
    async def test_unconfigured_is_down(self):
        result = await ApplicationLifecycle(CoolifyClient(CoolifyConfig())).health()

        assert result.status == "down"
        assert result.latency_ms >= 0
