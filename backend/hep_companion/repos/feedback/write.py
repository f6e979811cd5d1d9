"""
feedback/write.py
- Purpose: Persist clinician feedback on a suggestion.
"""

from hep_companion.db.supabase import execute


class FeedbackWriteRepo:
    def __init__(self, client):
        self.client = client

    def create_feedback(
        self,
        *,
        prompt_id: str,
        suggestion_id: str,
        relevance_score: int,
        user_id: str,
        comment: str | None = None,
    ) -> dict:
        rows = execute(
            self.client.table("feedback").insert(
                {
                    "prompt_id": prompt_id,
                    "suggestion_id": suggestion_id,
                    "relevance_score": relevance_score,
                    "comment": comment,
                    "user_id": user_id,
                }
            ),
            action="save feedback",
        )
        return rows[0]
