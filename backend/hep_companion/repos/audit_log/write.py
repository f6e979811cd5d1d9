"""
audit_log/write.py
- Purpose: Append-only application audit rows.
"""

from typing import Any

from hep_companion.db.supabase import execute


class AuditLogWriteRepo:
    def __init__(self, client):
        self.client = client

    def create(
        self,
        *,
        user_id: str,
        action: str,
        resource_type: str,
        resource_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        execute(
            self.client.table("audit_logs").insert(
                {
                    "user_id": user_id,
                    "action": action,
                    "resource_type": resource_type,
                    "resource_id": resource_id,
                    "details": details,
                }
            ),
            action="create audit log",
        )
