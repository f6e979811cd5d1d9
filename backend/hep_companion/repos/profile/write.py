"""
profile/write.py
- Purpose: Write-side operations for user profiles.
"""

from datetime import datetime, timezone

from hep_companion.db.supabase import execute


class ProfileWriteRepo:
    def __init__(self, client):
        self.client = client

    def set_organization(self, user_id: str, *, clinic_id: str, organization: str) -> None:
        execute(
            self.client.table("profiles")
            .update(
                {
                    "clinic_id": clinic_id,
                    "organization": organization,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                }
            )
            .eq("id", user_id),
            action="update profile",
        )
