"""
Control-plane response schemas.

Each endpoint the worker reads from has an explicit pydantic model.
Bodies that do not decode into the model raise ``ResponseShapeError``
("malformed ..."), which is distinct from a decoded model that simply
lacks its identity field.
"""

import logging
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ResponseShapeError

logger = logging.getLogger(__name__)


def tenant_marker(tenant_id: str) -> str:
    """Discovery marker embedded in a project description."""
    return f"tenant: {tenant_id}"


class ProjectSummary(BaseModel):
    """Entry of ``GET /projects``."""
    model_config = ConfigDict(extra="ignore")

    uuid: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None

    def belongs_to(self, tenant_id: str) -> bool:
        return tenant_marker(tenant_id) in (self.description or "")


class CreatedResource(BaseModel):
    """Body of ``POST /projects`` and ``POST /applications/public``."""
    model_config = ConfigDict(extra="ignore")

    uuid: Optional[str] = None
    name: Optional[str] = None


def parse_project_list(payload: Any) -> List[ProjectSummary]:
    """Decode ``GET /projects``; a non-list body means no projects."""
    if not isinstance(payload, list):
        return []

    projects = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        try:
            projects.append(ProjectSummary.model_validate(item))
        except ValidationError as e:
            logger.debug(f"Skipping malformed project entry: {e}")
    return projects


def parse_created(payload: Any, resource: str) -> CreatedResource:
    """Decode a creation response. An empty body decodes to a model without uuid."""
    if payload is None:
        return CreatedResource()
    if not isinstance(payload, dict):
        raise ResponseShapeError(f"malformed {resource} response")
    try:
        return CreatedResource.model_validate(payload)
    except ValidationError as e:
        raise ResponseShapeError(f"malformed {resource} response") from e
