# hep_companion/services/generation_service.py
"""
generation_service.py
- Purpose: Orchestrates "clinical prompt -> home exercise program" end-to-end.
- Owns: patient pseudonymization, system prompt assembly, processing attempts,
  persistence, audit.
- Design: Thick service; routers remain thin. Each processing attempt calls the
  generation API through call_with_retry (inside llm_generate).
"""

import json
import logging
import uuid
from typing import Any, AsyncIterator

from fastapi.concurrency import run_in_threadpool

from hep_companion.auth.session import AuthUser
from hep_companion.constants.audit import AuditAction, ResourceType
from hep_companion.core import AppError, ErrorCode, ErrorReason
from hep_companion.core.config import settings
from hep_companion.core.errors import internal_error
from hep_companion.core.request_context import set_context
from hep_companion.llm.client import llm_generate
from hep_companion.llm.errors import LLMError
from hep_companion.llm.parsing import GenerationValidationError, clean_and_parse, validate_program
from hep_companion.llm.prompts.templates import REPAIR_INSTRUCTIONS
from hep_companion.repos.exercise.read import ExerciseReadRepo
from hep_companion.repos.prompt.write import PromptWriteRepo
from hep_companion.schemas.generation_schema import (
    GeneratedProgram,
    GenerateRequest,
    GenerateResponse,
    SuggestedExercise,
)
from hep_companion.services.audit_service import AuditService
from hep_companion.utils.patient_key import generate_patient_key

logger = logging.getLogger("hep_companion.generation_service")

PURPOSE = "generate_hep"
PROMPT_NAME = "hep_system"
FALLBACK_PROMPT_NAME = "hep_system_fallback"
PROMPT_VERSION = "v1"

UPSTREAM_MESSAGE = "There was a problem connecting to our AI service"


def evidence_source(exercise: dict) -> str:
    source = f"{exercise.get('journal')}, {exercise.get('year')}"
    if exercise.get("doi"):
        source += f" (DOI: {exercise['doi']})"
    return source


def to_app_error(err: Exception | None) -> AppError:
    """Map the last processing failure to the API error the caller sees."""
    if isinstance(err, GenerationValidationError):
        return AppError(
            code=err.code,
            reason=ErrorReason.LLM_INVALID_OUTPUT,
            status_code=400,
            message=err.message,
            details=err.details or None,
        )

    if isinstance(err, LLMError):
        status = err.status_code if 400 <= err.status_code <= 599 else 502
        return AppError(
            code=ErrorCode.LLM_API_ERROR,
            reason=ErrorReason.LLM_FAILED,
            status_code=status,
            message=UPSTREAM_MESSAGE,
            details={"upstream": err.message, "retryable": err.retryable},
        )

    return internal_error(ErrorReason.INTERNAL_ERROR, message="Failed to generate suggestions")


class GenerationService:
    def __init__(self, client):
        self.exercise_read = ExerciseReadRepo(client)
        self.prompt_write = PromptWriteRepo(client)
        self.audit = AuditService(client)

    # ----------------------------
    # Prompt assembly
    # ----------------------------
    async def _system_prompt(self) -> tuple[str, dict[str, Any]]:
        try:
            exercises = await run_in_threadpool(self.exercise_read.list_exercises)
        except AppError:
            logger.exception("exercise_library_unavailable")
            return FALLBACK_PROMPT_NAME, {}

        library = [
            {
                "name": ex.get("name"),
                "condition": ex.get("condition"),
                "description": ex.get("description"),
                "evidence_source": evidence_source(ex),
            }
            for ex in exercises
        ]
        return PROMPT_NAME, {"exercise_library": json.dumps(library, indent=2)}

    # ----------------------------
    # Generation
    # ----------------------------
    async def _run_attempts(self, prompt_text: str, prompt_name: str, variables: dict[str, Any]) -> GeneratedProgram:
        max_attempts = max(1, settings.LLM_MAX_PROCESSING_ATTEMPTS)
        last_err: Exception | None = None

        for attempt in range(1, max_attempts + 1):
            attempt_vars = dict(variables)
            purpose = PURPOSE
            if attempt > 1:
                attempt_vars["__REPAIR_INSTRUCTIONS__"] = REPAIR_INSTRUCTIONS
                purpose = f"{PURPOSE}_repair"

            try:
                resp = await llm_generate(
                    purpose=purpose,
                    prompt_name=prompt_name,
                    prompt_version=PROMPT_VERSION,
                    variables=attempt_vars,
                    user_prompt=prompt_text,
                )
                return validate_program(clean_and_parse(resp.output_text))

            except GenerationValidationError as e:
                last_err = e
                logger.warning(
                    "processing_attempt_failed",
                    extra={"attempt": attempt, "code": e.code.value, "error": e.message},
                )
                if not e.recoverable:
                    break

            except LLMError as e:
                last_err = e
                logger.warning(
                    "processing_attempt_failed",
                    extra={"attempt": attempt, "status_code": e.status_code, "error": e.message},
                )

            except Exception as e:
                last_err = e
                logger.exception("processing_attempt_failed", extra={"attempt": attempt})

        logger.error("all_processing_attempts_failed", extra={"attempts": attempt})
        raise to_app_error(last_err)

    async def _store(
        self,
        user: AuthUser,
        req: GenerateRequest,
        program: GeneratedProgram,
        patient_key: str | None,
    ) -> GenerateResponse:
        suggestion_id = str(uuid.uuid4())
        set_context(prompt_id=suggestion_id)

        response = GenerateResponse(
            id=suggestion_id,
            exercises=[SuggestedExercise(**ex.model_dump(), id=str(uuid.uuid4())) for ex in program.exercises],
            clinical_notes=program.clinical_notes,
            citations=program.citations,
            confidence_level=program.confidence_level,
        )

        await run_in_threadpool(
            lambda: self.prompt_write.create_prompt(
                prompt_id=suggestion_id,
                prompt_text=req.prompt,
                raw_llm_output=response.model_dump(mode="json"),
                user_id=user.id,
                patient_key=patient_key,
            )
        )

        await run_in_threadpool(
            lambda: self.audit.log(
                user_id=user.id,
                action=AuditAction.GENERATE,
                resource_type=ResourceType.PROMPT,
                resource_id=suggestion_id,
                details={
                    "has_patient_key": patient_key is not None,
                    "exercises_count": len(response.exercises),
                    "confidence_level": response.confidence_level,
                },
            )
        )

        logger.info("suggestions_stored", extra={"exercises_count": len(response.exercises)})
        return response

    @staticmethod
    def _patient_key(req: GenerateRequest) -> str | None:
        if req.mrn and req.clinic_id:
            return generate_patient_key(req.mrn, req.clinic_id)
        return None

    async def generate(self, user: AuthUser, req: GenerateRequest) -> GenerateResponse:
        patient_key = self._patient_key(req)
        prompt_name, variables = await self._system_prompt()
        program = await self._run_attempts(req.prompt, prompt_name, variables)
        return await self._store(user, req, program, patient_key)

    async def generate_events(self, user: AuthUser, req: GenerateRequest) -> AsyncIterator[dict[str, Any]]:
        """Same pipeline as generate(), reported as progress events."""
        try:
            yield {"stage": "started", "message": "Starting generation", "progress": 0}
            patient_key = self._patient_key(req)

            yield {"stage": "fetching-exercises", "message": "Loading exercise library", "progress": 10}
            prompt_name, variables = await self._system_prompt()

            yield {"stage": "generating", "message": "Generating exercise suggestions", "progress": 30}
            program = await self._run_attempts(req.prompt, prompt_name, variables)

            yield {
                "stage": "validating",
                "message": f"Validated {len(program.exercises)} exercise suggestions",
                "progress": 70,
            }

            yield {"stage": "storing", "message": "Saving suggestions", "progress": 85}
            result = await self._store(user, req, program, patient_key)

            yield {
                "stage": "complete",
                "message": "Suggestions ready",
                "progress": 100,
                "result": result.model_dump(mode="json"),
            }

        except AppError as e:
            yield {
                "stage": "error",
                "message": e.message or str(e),
                "progress": 100,
                "error": e.message or str(e),
                "code": getattr(e.code, "value", e.code),
            }
        except Exception:
            # Response headers are already sent; report in-band.
            logger.exception("generation_stream_failed")
            yield {
                "stage": "error",
                "message": "Failed to generate suggestions",
                "progress": 100,
                "error": "Failed to generate suggestions",
                "code": ErrorCode.INTERNAL_ERROR.value,
            }
