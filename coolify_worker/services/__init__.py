"""
Coolify Worker Services

- projects: Tenant project get-or-create
- sites: Static site provisioning workflow
- applications: Lifecycle operations on existing applications
"""

from .applications import ApplicationLifecycle, HealthResult
from .projects import ProjectRef, ProjectResolver
from .sites import ProvisionedSite, SiteProvisioner, SiteRequest

__all__ = [
    "ApplicationLifecycle",
    "HealthResult",
    "ProjectRef",
    "ProjectResolver",
    "ProvisionedSite",
    "SiteProvisioner",
    "SiteRequest",
]
