"""
Tenant Project Resolver

Finds or creates the Coolify project that groups a tenant's applications.
Projects are discovered only through the ``tenant: <tenantId>`` marker in
their description; names are display-only and may collide across tenants.

The lookup and the creation are separate calls with no lock between them,
so two concurrent calls for one tenant can both create a project. Callers
that need strict idempotency must serialize per tenant.
"""

import logging
from dataclasses import dataclass

from ..client import CoolifyClient
from ..errors import PayloadValidationError, ResponseShapeError
from ..schemas import parse_created, parse_project_list, tenant_marker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectRef:
    uuid: str
    name: str


def project_name_for(tenant_id: str, company_name: str = "") -> str:
    short_id = tenant_id[:8]
    if company_name:
        return f"{company_name} ({short_id})"
    return f"tenant-{short_id}"


def project_description_for(tenant_id: str, company_name: str = "") -> str:
    return f"Company: {company_name or 'N/A'} ({tenant_marker(tenant_id)})"


class ProjectResolver:
    """Idempotent (best-effort) get-or-create of a tenant's project."""

    def __init__(self, client: CoolifyClient):
        self.client = client

    async def get_or_create(self, tenant_id: str, company_name: str = "") -> ProjectRef:
        """
        Return the tenant's project, creating it if no project carries its marker.

        Args:
            tenant_id: Tenant identifier (non-empty)
            company_name: Human-readable company name, may be empty

        Returns:
            ProjectRef of the found or created project
        """
        if not tenant_id:
            raise PayloadValidationError(["tenantId"])

        projects = parse_project_list(await self.client.execute("/projects"))
        found = next((p for p in projects if p.belongs_to(tenant_id)), None)

        if found is not None and found.uuid:
            logger.info(
                f"Found existing project {found.uuid} for tenant {tenant_id}",
                extra={"tenant_id": tenant_id, "project_uuid": found.uuid},
            )
            return ProjectRef(uuid=found.uuid, name=found.name or "")

        project_name = project_name_for(tenant_id, company_name)
        payload = await self.client.execute(
            "/projects",
            method="POST",
            body={
                "name": project_name,
                "description": project_description_for(tenant_id, company_name),
            },
        )

        created = parse_created(payload, "project")
        if not created.uuid:
            raise ResponseShapeError("Project UUID not returned")

        logger.info(
            f"Created project {created.uuid} for tenant {tenant_id}",
            extra={"tenant_id": tenant_id, "project_uuid": created.uuid},
        )
        return ProjectRef(uuid=created.uuid, name=created.name or project_name)
