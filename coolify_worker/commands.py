"""
Coolify Command Registry
========================

Maps command names (``coolify.*``) to handlers with a typed payload.

Payloads are validated centrally before any handler runs, so a missing
required field never reaches the network. Every outcome, including
handler failures, is returned as a dict with a ``success`` flag; nothing
propagates to the transport.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from .errors import PayloadValidationError
from .services import SiteRequest
from .worker import CoolifyWorker

logger = logging.getLogger(__name__)


# ============================================
# PAYLOADS
# ============================================

class CommandPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class EmptyPayload(CommandPayload):
    pass


class ProjectPayload(CommandPayload):
    tenant_id: str = Field(alias="tenantId", min_length=1)
    company_name: Optional[str] = Field(default="", alias="companyName")


class StaticSitePayload(CommandPayload):
    project_uuid: str = Field(alias="projectUuid", min_length=1)
    name: str = Field(min_length=1)
    subdomain: str = Field(min_length=1)
    site_path: str = Field(alias="sitePath", min_length=1)


class AppPayload(CommandPayload):
    app_uuid: str = Field(alias="appUuid", min_length=1)


class DomainPayload(AppPayload):
    domain: str = Field(min_length=1)


class MaintenancePayload(AppPayload):
    enabled: StrictBool


Handler = Callable[[Any], Awaitable[Optional[Dict[str, Any]]]]


@dataclass(frozen=True)
class Command:
    name: str
    payload_model: Type[CommandPayload]
    handler: Handler

    def parse(self, payload: Any) -> CommandPayload:
        if not isinstance(payload, dict):
            payload = {}
        try:
            return self.payload_model.model_validate(payload)
        except ValidationError as e:
            fields: List[str] = []
            for error in e.errors():
                field = ".".join(str(part) for part in error["loc"]) or "payload"
                if field not in fields:
                    fields.append(field)
            raise PayloadValidationError(fields) from e


class CommandRegistry:
    """
    Typed command dispatch.

    Usage:
        registry = CommandRegistry()

        @registry.register("coolify.restart_application", AppPayload)
        async def restart(payload: AppPayload):
            ...

        result = await registry.dispatch("coolify.restart_application", {"appUuid": "a1"})
    """

    def __init__(self):
        self._commands: Dict[str, Command] = {}

    def register(self, name: str, payload_model: Type[CommandPayload] = EmptyPayload):
        def decorator(handler: Handler) -> Handler:
            if name in self._commands:
                raise ValueError(f"Command already registered: {name}")
            self._commands[name] = Command(name, payload_model, handler)
            return handler
        return decorator

    @property
    def names(self) -> List[str]:
        return sorted(self._commands)

    def __contains__(self, name: str) -> bool:
        return name in self._commands

    async def dispatch(self, name: str, payload: Any = None) -> Dict[str, Any]:
        """
        Validate ``payload`` and run the handler registered under ``name``.

        Returns:
            ``{"success": True, ...handler result}`` or ``{"success": False, "message": ...}``
        """
        command = self._commands.get(name)
        if command is None:
            logger.warning(f"Unknown command: {name}", extra={"command": name})
            return {"success": False, "message": f"unknown command: {name}"}

        try:
            args = command.parse(payload)
        except PayloadValidationError as e:
            logger.info(f"{name} rejected: {e}", extra={"command": name})
            return {"success": False, "message": str(e)}

        logger.info(f"{name}: {args.model_dump(by_alias=True)}", extra={"command": name})
        try:
            result = await command.handler(args)
        except Exception as e:
            logger.error(f"{name} failed: {e}", extra={"command": name})
            return {"success": False, "message": str(e) or "internal_error"}

        return {"success": True, **(result or {})}


# ============================================
# COOLIFY COMMANDS
# ============================================

def build_registry(worker: CoolifyWorker) -> CommandRegistry:
    """Register the ``coolify.*`` commands against ``worker``."""
    registry = CommandRegistry()

    @registry.register("coolify.health")
    async def health(payload: EmptyPayload):
        result = await worker.applications.health()
        return {"status": result.status, "latencyMs": result.latency_ms}

    @registry.register("coolify.get_or_create_project", ProjectPayload)
    async def get_or_create_project(payload: ProjectPayload):
        project = await worker.projects.get_or_create(
            payload.tenant_id,
            payload.company_name or "",
        )
        return {"projectUuid": project.uuid, "projectName": project.name}

    @registry.register("coolify.create_static_site_app", StaticSitePayload)
    async def create_static_site_app(payload: StaticSitePayload):
        site = await worker.sites.create_static_site_app(
            SiteRequest(
                project_uuid=payload.project_uuid,
                name=payload.name,
                subdomain=payload.subdomain,
                site_path=payload.site_path,
            )
        )
        return {"appUuid": site.uuid, "url": site.url}

    @registry.register("coolify.restart_application", AppPayload)
    async def restart_application(payload: AppPayload):
        await worker.applications.restart(payload.app_uuid)

    @registry.register("coolify.set_domain", DomainPayload)
    async def set_domain(payload: DomainPayload):
        await worker.applications.set_domain(payload.app_uuid, payload.domain)

    @registry.register("coolify.toggle_maintenance", MaintenancePayload)
    async def toggle_maintenance(payload: MaintenancePayload):
        await worker.applications.toggle_maintenance(payload.app_uuid, payload.enabled)

    @registry.register("coolify.delete_application", AppPayload)
    async def delete_application(payload: AppPayload):
        await worker.applications.delete(payload.app_uuid)

    return registry
