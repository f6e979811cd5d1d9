"""
organization/write.py
- Purpose: Write-side operations for Organization.
"""

from hep_companion.db.supabase import execute


class OrganizationWriteRepo:
    def __init__(self, client):
        self.client = client

    def create(self, *, name: str, clinic_id: str) -> dict:
        rows = execute(
            self.client.table("organizations").insert({"name": name, "clinic_id": clinic_id}),
            action="create organization",
        )
        return rows[0]
