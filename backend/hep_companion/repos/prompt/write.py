"""
prompt/write.py
- Purpose: Persist a clinical prompt together with the model output.
- Design: No business logic. Only persistence and minimal mapping.
"""

from typing import Any

from hep_companion.db.supabase import execute


class PromptWriteRepo:
    def __init__(self, client):
        self.client = client

    def create_prompt(
        self,
        *,
        prompt_id: str,
        prompt_text: str,
        raw_llm_output: dict[str, Any],
        user_id: str,
        patient_key: str | None = None,
    ) -> dict:
        rows = execute(
            self.client.table("prompts").insert(
                {
                    "id": prompt_id,
                    "prompt_text": prompt_text,
                    "raw_llm_output": raw_llm_output,
                    "user_id": user_id,
                    "patient_key": patient_key,
                }
            ),
            action="store suggestions",
        )
        return rows[0] if rows else {"id": prompt_id}
