"""
Coolify Worker
==============

Provisioning and management of tenant-scoped static sites on a Coolify
control plane.

This package provides:
- Control-plane HTTP client with base URL resolution
- Tenant project get-or-create
- Static site application provisioning workflow
- Application lifecycle operations (restart, domain, maintenance, delete)
- Typed command registry and HTTP surface
"""

__version__ = "1.0.0"
