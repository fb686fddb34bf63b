"""
Application Lifecycle Operations

Restart, domain change, maintenance toggle and delete for an existing
Coolify application, plus the control-plane health probe.

Maintenance mode is stop/start only: enabling it stops the application,
disabling it starts it again. No maintenance page is served.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from ..client import CoolifyClient

logger = logging.getLogger(__name__)


def normalize_domain(domain: str) -> str:
    """Prefix ``https://`` unless the domain already carries a scheme."""
    domain = domain.strip()
    if domain.startswith(("http://", "https://")):
        return domain
    return f"https://{domain}"


@dataclass(frozen=True)
class HealthResult:
    status: str  # "up" | "down"
    latency_ms: int
    error: Optional[str] = None

    @property
    def is_up(self) -> bool:
        return self.status == "up"


class ApplicationLifecycle:
    """Operations on applications that already exist in the control plane."""

    def __init__(self, client: CoolifyClient):
        self.client = client

    async def restart(self, app_uuid: str):
        await self.client.execute(f"/applications/{app_uuid}/restart", method="POST")
        logger.info(f"Restarted application {app_uuid}", extra={"app_uuid": app_uuid})

    async def set_domain(self, app_uuid: str, domain: str) -> str:
        """
        Bind ``domain`` to the application.

        Returns:
            The absolute URL that was bound
        """
        fqdn = normalize_domain(domain)
        await self.client.execute(
            f"/applications/{app_uuid}",
            method="PATCH",
            body={"domains": fqdn},
        )
        logger.info(f"Bound {fqdn} to application {app_uuid}", extra={"app_uuid": app_uuid})
        return fqdn

    async def toggle_maintenance(self, app_uuid: str, enabled: bool):
        action = "stop" if enabled else "start"
        await self.client.execute(f"/applications/{app_uuid}/{action}", method="POST")
        logger.info(
            f"Maintenance {'on' if enabled else 'off'} for application {app_uuid} ({action})",
            extra={"app_uuid": app_uuid},
        )

    async def delete(self, app_uuid: str):
        await self.client.execute(f"/applications/{app_uuid}", method="DELETE")
        logger.info(f"Deleted application {app_uuid}", extra={"app_uuid": app_uuid})

    async def health(self, timeout: Optional[float] = None) -> HealthResult:
        """
        Probe ``GET version``. Never raises.

        Args:
            timeout: Optional bound in seconds (used by the readiness probe)
        """
        start = time.monotonic()
        try:
            await self.client.execute("version", timeout=timeout)
        except Exception as e:
            latency_ms = int((time.monotonic() - start) * 1000)
            logger.debug(f"Coolify health check failed: {e}")
            return HealthResult(status="down", latency_ms=latency_ms, error=str(e) or type(e).__name__)
        return HealthResult(status="up", latency_ms=int((time.monotonic() - start) * 1000))
