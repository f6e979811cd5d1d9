from fastapi import APIRouter, Depends

from hep_companion.api.deps import get_feedback_service
from hep_companion.auth.deps import require_user
from hep_companion.auth.session import AuthUser
from hep_companion.schemas.feedback import FeedbackCreate
from hep_companion.services.feedback_service import FeedbackService

router = APIRouter(prefix="/api/feedback", tags=["Feedback"])


@router.post("")
def submit_feedback(
    payload: FeedbackCreate,
    user: AuthUser = Depends(require_user),
    svc: FeedbackService = Depends(get_feedback_service),
):
    out = svc.submit(user, payload)
    return {"success": True, "data": out.model_dump()}
