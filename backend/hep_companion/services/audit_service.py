"""
audit_service.py
- Purpose: Application-level audit trail (in addition to database triggers).
- Design: Best-effort. A failed audit write is logged and never fails the
  request that triggered it.
"""

import logging
from typing import Any

from hep_companion.constants.audit import AuditAction, ResourceType
from hep_companion.core import AppError
from hep_companion.repos.audit_log.write import AuditLogWriteRepo

logger = logging.getLogger("hep_companion.audit")


class AuditService:
    def __init__(self, client):
        self.repo = AuditLogWriteRepo(client)

    def log(
        self,
        *,
        user_id: str,
        action: AuditAction,
        resource_type: ResourceType,
        resource_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        try:
            self.repo.create(
                user_id=user_id,
                action=action.value,
                resource_type=resource_type.value,
                resource_id=resource_id,
                details=details,
            )
        except AppError:
            logger.exception(
                "audit_log_failed",
                extra={"action": action.value, "resource_type": resource_type.value, "resource_id": resource_id},
            )
