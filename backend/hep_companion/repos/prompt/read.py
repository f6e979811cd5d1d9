"""
prompt/read.py
- Purpose: Read-side operations for stored prompts (generation requests).
"""

from hep_companion.db.supabase import execute


class PromptReadRepo:
    def __init__(self, client):
        self.client = client

    def get_by_id(self, prompt_id: str) -> dict | None:
        rows = execute(
            self.client.table("prompts").select("id, user_id").eq("id", prompt_id).limit(1),
            action="fetch prompt",
        )
        return rows[0] if rows else None
