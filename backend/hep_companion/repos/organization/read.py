"""
organization/read.py
- Purpose: Read-side operations for Organization.
"""

from hep_companion.db.supabase import escape_like, execute

_COLUMNS = "id, name, clinic_id"


class OrganizationReadRepo:
    def __init__(self, client):
        self.client = client

    def get_by_clinic_id(self, clinic_id: str) -> dict | None:
        rows = execute(
            self.client.table("organizations").select(_COLUMNS).eq("clinic_id", clinic_id).limit(1),
            action="fetch organization",
        )
        return rows[0] if rows else None

    def get_by_name(self, name: str) -> dict | None:
        # Case-insensitive exact match
        rows = execute(
            self.client.table("organizations").select(_COLUMNS).ilike("name", escape_like(name)).limit(1),
            action="fetch organization",
        )
        return rows[0] if rows else None

    def search(self, query: str) -> list[dict]:
        return execute(
            self.client.rpc("search_organizations", {"search_term": query}),
            action="search organizations",
        )
