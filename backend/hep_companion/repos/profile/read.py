"""
profile/read.py
- Purpose: Read-side operations for user profiles.
"""

from hep_companion.db.supabase import execute


class ProfileReadRepo:
    def __init__(self, client):
        self.client = client

    def get_by_user_id(self, user_id: str) -> dict | None:
        rows = execute(
            self.client.table("profiles").select("id, onboarding_completed, clinic_id").eq("id", user_id).limit(1),
            action="fetch profile",
        )
        return rows[0] if rows else None
