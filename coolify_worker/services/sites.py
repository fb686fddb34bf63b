"""
Static Site Provisioner

Creates a Coolify application that serves one tenant site:
1. Create the application from the nginx proxy repository (deploy deferred)
2. Inject object store endpoint, bucket and site path as env vars
3. Re-assert the domain binding
4. Start the deployment

Steps run strictly in order. The first failure ends the workflow; an
application that was already created is left in place and its record in
the ProvisioningLog shows the step that failed.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..client import CoolifyClient
from ..config import SiteImageConfig, StorageConfig
from ..errors import (
    ConfigurationError,
    PayloadValidationError,
    ProvisioningError,
    ResponseShapeError,
)
from ..provisioning_log import ProvisioningLog, ProvisioningRecord, ProvisioningStep
from ..schemas import parse_created

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SiteRequest:
    """Input of one provisioning call."""
    project_uuid: str
    name: str
    subdomain: str
    site_path: str

    def missing_fields(self) -> list:
        fields = {
            "projectUuid": self.project_uuid,
            "name": self.name,
            "subdomain": self.subdomain,
            "sitePath": self.site_path,
        }
        return [key for key, value in fields.items() if not value]

    @property
    def fqdn(self) -> str:
        return f"https://{self.subdomain}"


@dataclass(frozen=True)
class ProvisionedSite:
    uuid: str
    url: str


class SiteProvisioner:
    """
    Runs the static site workflow against the control plane.

    Usage:
        provisioner = SiteProvisioner(client, server_uuid, "production", storage, image)
        site = await provisioner.create_static_site_app(SiteRequest(...))
    """

    def __init__(
        self,
        client: CoolifyClient,
        server_uuid: str,
        environment_name: str = "production",
        storage: Optional[StorageConfig] = None,
        site_image: Optional[SiteImageConfig] = None,
        provisioning_log: Optional[ProvisioningLog] = None,
    ):
        self.client = client
        self.server_uuid = server_uuid
        self.environment_name = environment_name
        self.storage = storage or StorageConfig()
        self.site_image = site_image or SiteImageConfig()
        self.provisioning_log = provisioning_log or ProvisioningLog()

    def application_payload(self, request: SiteRequest) -> dict:
        return {
            "project_uuid": request.project_uuid,
            "server_uuid": self.server_uuid,
            "environment_name": self.environment_name,
            "name": request.name,
            "git_repository": self.site_image.repository,
            "git_branch": self.site_image.branch,
            "build_pack": "dockerfile",
            "ports_exposes": "80",
            "domains": request.fqdn,
            "instant_deploy": False,
        }

    def env_payload(self, request: SiteRequest) -> dict:
        return {
            "data": [
                {"key": "MINIO_URL", "value": self.storage.public_endpoint},
                {"key": "BUCKET", "value": self.storage.bucket},
                {"key": "SITE_PATH", "value": request.site_path},
            ]
        }

    async def create_static_site_app(self, request: SiteRequest) -> ProvisionedSite:
        """
        Provision a static site application.

        Args:
            request: Project, app name, subdomain and content path

        Returns:
            ProvisionedSite with the application uuid and https URL

        Raises:
            PayloadValidationError: A request field is empty (nothing is sent)
            ConfigurationError: No server uuid configured
            ProvisioningError: A workflow step failed
        """
        missing = request.missing_fields()
        if missing:
            raise PayloadValidationError(missing)
        if not self.server_uuid:
            raise ConfigurationError("COOLIFY_SERVER_UUID is required")

        record = self.provisioning_log.start(
            project_uuid=request.project_uuid,
            name=request.name,
            subdomain=request.subdomain,
            site_path=request.site_path,
        )
        logger.info(
            f"Creating static site app: {request.name} -> {request.fqdn}",
            extra={"project_uuid": request.project_uuid},
        )

        app_uuid = await self._run_step(record, ProvisioningStep.CREATE, self._create, request)
        await self._run_step(record, ProvisioningStep.CONFIGURE, self._configure, request, app_uuid)
        await self._run_step(record, ProvisioningStep.BIND_DOMAIN, self._bind_domain, request, app_uuid)
        await self._run_step(record, ProvisioningStep.START, self._start, app_uuid)

        logger.info(
            f"Created static site app {app_uuid}: {request.fqdn}",
            extra={"app_uuid": app_uuid},
        )
        return ProvisionedSite(uuid=app_uuid, url=request.fqdn)

    async def _run_step(self, record: ProvisioningRecord, step: ProvisioningStep, action, *args):
        try:
            result = await action(*args)
        except Exception as e:
            self.provisioning_log.fail(record, step, e)
            raise ProvisioningError(step.value, e, app_uuid=record.app_uuid) from e

        self.provisioning_log.advance(
            record,
            step,
            app_uuid=result if step == ProvisioningStep.CREATE else None,
        )
        return result

    async def _create(self, request: SiteRequest) -> str:
        payload = await self.client.execute(
            "/applications/public",
            method="POST",
            body=self.application_payload(request),
        )
        created = parse_created(payload, "application")
        if not created.uuid:
            raise ResponseShapeError("Application UUID not returned")
        return created.uuid

    async def _configure(self, request: SiteRequest, app_uuid: str):
        await self.client.execute(
            f"/applications/{app_uuid}/envs/bulk",
            method="PATCH",
            body=self.env_payload(request),
        )

    async def _bind_domain(self, request: SiteRequest, app_uuid: str):
        await self.client.execute(
            f"/applications/{app_uuid}",
            method="PATCH",
            body={"domains": request.fqdn},
        )

    async def _start(self, app_uuid: str):
        await self.client.execute(f"/applications/{app_uuid}/start", method="POST")
