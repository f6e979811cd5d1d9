from fastapi import Depends

from hep_companion.db.supabase import get_supabase_client
from hep_companion.services.exercise_service import ExerciseService
from hep_companion.services.feedback_service import FeedbackService
from hep_companion.services.generation_service import GenerationService
from hep_companion.services.organization_service import OrganizationService


def get_supabase():
    """
    Provides the Supabase client.
    Using Depends(get_supabase) allows tests to swap in a fake client.
    """
    return get_supabase_client()


def get_generation_service(client=Depends(get_supabase)) -> GenerationService:
    return GenerationService(client)


def get_feedback_service(client=Depends(get_supabase)) -> FeedbackService:
    return FeedbackService(client)


def get_exercise_service(client=Depends(get_supabase)) -> ExerciseService:
    return ExerciseService(client)


def get_organization_service(client=Depends(get_supabase)) -> OrganizationService:
    return OrganizationService(client)
