"""
Site Provisioning Log
=====================

In-memory record of static site provisioning runs that have not finished.
Partially provisioned applications stay visible here so a later
reconciliation pass can find them; nothing is rolled back. Runs that reach
STARTED are dropped, and the log is capped in size.

Records live only for the lifetime of the process.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from collections import OrderedDict
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class ProvisioningState(Enum):
    """States in the static site workflow."""
    PENDING = "pending"
    CREATED = "created"
    CONFIGURED = "configured"
    DOMAIN_BOUND = "domain_bound"
    STARTED = "started"
    FAILED = "failed"


class ProvisioningStep(Enum):
    """Workflow steps, in execution order."""
    CREATE = "create"
    CONFIGURE = "configure"
    BIND_DOMAIN = "bind_domain"
    START = "start"


# State reached when each step succeeds
STEP_RESULT_STATE = {
    ProvisioningStep.CREATE: ProvisioningState.CREATED,
    ProvisioningStep.CONFIGURE: ProvisioningState.CONFIGURED,
    ProvisioningStep.BIND_DOMAIN: ProvisioningState.DOMAIN_BOUND,
    ProvisioningStep.START: ProvisioningState.STARTED,
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ProvisioningRecord:
    """Tracks one provisioning run through its lifecycle."""
    record_id: str
    project_uuid: str
    name: str
    subdomain: str
    site_path: str

    state: ProvisioningState = ProvisioningState.PENDING
    app_uuid: Optional[str] = None
    failed_step: Optional[ProvisioningStep] = None
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    @property
    def is_complete(self) -> bool:
        return self.state == ProvisioningState.STARTED

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "recordId": self.record_id,
            "projectUuid": self.project_uuid,
            "name": self.name,
            "subdomain": self.subdomain,
            "sitePath": self.site_path,
            "state": self.state.value,
            "appUuid": self.app_uuid,
            "failedStep": self.failed_step.value if self.failed_step else None,
            "error": self.error_message,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


class ProvisioningLog:
    """
    Thread-safe in-memory store of provisioning records.

    Only runs that have not reached STARTED are retained: a run is dropped
    as soon as its last step succeeds. At most ``max_records`` runs are
    kept; the oldest is evicted first.
    """

    DEFAULT_MAX_RECORDS = 1000

    def __init__(self, max_records: int = DEFAULT_MAX_RECORDS):
        if max_records < 1:
            raise ValueError("max_records must be at least 1")
        self.max_records = max_records
        self._records: "OrderedDict[str, ProvisioningRecord]" = OrderedDict()
        self._lock = threading.Lock()

    def start(
        self,
        project_uuid: str,
        name: str,
        subdomain: str,
        site_path: str,
    ) -> ProvisioningRecord:
        """Open a record in the PENDING state."""
        record = ProvisioningRecord(
            record_id=str(uuid.uuid4()),
            project_uuid=project_uuid,
            name=name,
            subdomain=subdomain,
            site_path=site_path,
        )
        with self._lock:
            self._records[record.record_id] = record
            while len(self._records) > self.max_records:
                evicted_id, evicted = self._records.popitem(last=False)
                logger.warning(
                    f"Provisioning log full, evicting {evicted_id} ({evicted.state.value})",
                    extra={"app_uuid": evicted.app_uuid},
                )
        logger.info(
            f"Provisioning {record.record_id} opened for {name} -> {subdomain}",
            extra={"project_uuid": project_uuid},
        )
        return record

    def advance(
        self,
        record: ProvisioningRecord,
        step: ProvisioningStep,
        app_uuid: Optional[str] = None,
    ) -> ProvisioningRecord:
        """Mark ``step`` as done; a run that reaches STARTED leaves the log."""
        with self._lock:
            record.state = STEP_RESULT_STATE[step]
            if app_uuid:
                record.app_uuid = app_uuid
            record.updated_at = _now()
            if record.is_complete:
                self._records.pop(record.record_id, None)
        logger.info(
            f"Provisioning {record.record_id}: {record.state.value}",
            extra={"app_uuid": record.app_uuid, "step": step.value},
        )
        return record

    def fail(
        self,
        record: ProvisioningRecord,
        step: ProvisioningStep,
        error: BaseException,
    ) -> ProvisioningRecord:
        """Mark the run as failed at ``step``."""
        with self._lock:
            reached = record.state
            record.state = ProvisioningState.FAILED
            record.failed_step = step
            record.error_message = str(error) or type(error).__name__
            record.updated_at = _now()
        logger.error(
            f"Provisioning {record.record_id} failed at {step.value} "
            f"(reached {reached.value}): {record.error_message}",
            extra={"app_uuid": record.app_uuid, "step": step.value},
        )
        return record

    def get(self, record_id: str) -> Optional[ProvisioningRecord]:
        with self._lock:
            return self._records.get(record_id)

    def list_records(self) -> List[ProvisioningRecord]:
        with self._lock:
            return list(self._records.values())

    def list_incomplete(self) -> List[ProvisioningRecord]:
        """Records that never reached STARTED, including failures that left an app behind."""
        return [r for r in self.list_records() if not r.is_complete]
