"""
feedback_service.py
- Purpose: Record a clinician's rating of a generated suggestion.
- Owns: prompt ownership check, persistence, audit.
"""

import logging

from hep_companion.auth.session import AuthUser
from hep_companion.constants.audit import AuditAction, ResourceType
from hep_companion.core.errors import forbidden, not_found
from hep_companion.repos.feedback.write import FeedbackWriteRepo
from hep_companion.repos.prompt.read import PromptReadRepo
from hep_companion.schemas.feedback import FeedbackCreate, FeedbackOut
from hep_companion.services.audit_service import AuditService

logger = logging.getLogger("hep_companion.feedback_service")


class FeedbackService:
    def __init__(self, client):
        self.prompt_read = PromptReadRepo(client)
        self.feedback_write = FeedbackWriteRepo(client)
        self.audit = AuditService(client)

    def submit(self, user: AuthUser, payload: FeedbackCreate) -> FeedbackOut:
        prompt_id = str(payload.prompt_id)

        prompt = self.prompt_read.get_by_id(prompt_id)
        if not prompt:
            raise not_found(message="Prompt not found")

        if str(prompt.get("user_id")) != user.id:
            logger.warning(
                "feedback_forbidden",
                extra={"prompt_id": prompt_id, "attempted_by": user.id},
            )
            raise forbidden(message="Unauthorized access to this prompt")

        row = self.feedback_write.create_feedback(
            prompt_id=prompt_id,
            suggestion_id=payload.suggestion_id,
            relevance_score=payload.relevance_score,
            comment=payload.comment,
            user_id=user.id,
        )
        feedback_id = str(row["id"])

        self.audit.log(
            user_id=user.id,
            action=AuditAction.FEEDBACK,
            resource_type=ResourceType.FEEDBACK,
            resource_id=feedback_id,
            details={
                "prompt_id": prompt_id,
                "suggestion_id": payload.suggestion_id,
                "score": payload.relevance_score,
            },
        )

        return FeedbackOut(
            id=feedback_id,
            prompt_id=prompt_id,
            suggestion_id=payload.suggestion_id,
            relevance_score=payload.relevance_score,
        )
