"""
Coolify Worker HTTP API
=======================

FastAPI surface for the worker:
- Liveness and readiness probes
- Command delivery (``POST /commands/{name}``) for callers without the
  message transport
- Read-only view of the provisioning log for reconciliation

To run: python -m coolify_worker.run_server
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException

from .commands import build_registry
from .config import WorkerConfig
from .worker import CoolifyWorker

logger = logging.getLogger(__name__)

SERVICE_NAME = "coolify-worker"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_app(config: WorkerConfig, worker: Optional[CoolifyWorker] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Immutable worker configuration
        worker: Prebuilt worker (tests inject one with a fake transport)
    """
    worker = worker or CoolifyWorker(config)
    registry = build_registry(worker)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{SERVICE_NAME} ready, commands: {', '.join(registry.names)}")
        yield
        await worker.close()

    app = FastAPI(
        title="Coolify Worker",
        description="Tenant static site provisioning on Coolify",
        lifespan=lifespan,
    )
    app.state.worker = worker
    app.state.registry = registry

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "timestamp": _timestamp(),
        }

    @app.get("/health/ready")
    async def readiness():
        result = await worker.applications.health(timeout=config.readiness_timeout_seconds)
        check: Dict[str, Any] = {
            "name": "coolify-api",
            "status": result.status,
            "latencyMs": result.latency_ms,
        }
        if result.error:
            check["error"] = result.error
        return {
            "status": "ok" if result.is_up else "degraded",
            "service": SERVICE_NAME,
            "timestamp": _timestamp(),
            "checks": [check],
        }

    @app.post("/commands/{name}")
    async def run_command(name: str, payload: Optional[Dict[str, Any]] = Body(default=None)):
        return await registry.dispatch(name, payload)

    @app.get("/provisioning")
    async def list_provisioning():
        return {"records": [r.to_dict() for r in worker.provisioning_log.list_records()]}

    @app.get("/provisioning/incomplete")
    async def list_incomplete_provisioning():
        return {"records": [r.to_dict() for r in worker.provisioning_log.list_incomplete()]}

    @app.get("/provisioning/{record_id}")
    async def get_provisioning(record_id: str):
        record = worker.provisioning_log.get(record_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Provisioning record not found")
        return record.to_dict()

    return app


def create_app_from_env() -> FastAPI:
    """Create app using environment variables."""
    return create_app(WorkerConfig.from_env())
