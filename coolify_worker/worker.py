"""
Worker composition root.

Builds the control-plane client once from the immutable configuration and
shares it between the services.
"""

import logging
from typing import Optional

import httpx

from .client import CoolifyClient
from .config import WorkerConfig
from .provisioning_log import ProvisioningLog
from .services import ApplicationLifecycle, ProjectResolver, SiteProvisioner

logger = logging.getLogger(__name__)


class CoolifyWorker:
    """
    Holds the client and the services built on it.

    Usage:
        async with CoolifyWorker(WorkerConfig.from_env()) as worker:
            project = await worker.projects.get_or_create("tenant-1", "Acme")
    """

    def __init__(
        self,
        config: WorkerConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        provisioning_log: Optional[ProvisioningLog] = None,
    ):
        self.config = config
        self.client = CoolifyClient(config.coolify, transport=transport)
        self.provisioning_log = provisioning_log or ProvisioningLog(
            max_records=config.provisioning_log_max_records,
        )

        self.projects = ProjectResolver(self.client)
        self.sites = SiteProvisioner(
            self.client,
            server_uuid=config.coolify.server_uuid,
            environment_name=config.coolify.environment_name,
            storage=config.storage,
            site_image=config.site_image,
            provisioning_log=self.provisioning_log,
        )
        self.applications = ApplicationLifecycle(self.client)

        if config.coolify.is_configured:
            logger.info(f"Coolify API base: {self.client.base_url}")

    async def close(self):
        await self.client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()
