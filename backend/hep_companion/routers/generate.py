"""
generate.py
- Purpose: API routes that turn a clinical prompt into a home exercise program.
- Design: Keep router thin. Delegate business logic to GenerationService.
"""

import json

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from hep_companion.api.deps import get_generation_service
from hep_companion.auth.deps import require_user
from hep_companion.auth.session import AuthUser
from hep_companion.schemas.generation_schema import GenerateRequest, GenerateResponse
from hep_companion.services.generation_service import GenerationService

router = APIRouter(prefix="/api", tags=["Generate"])


@router.post("/generate", response_model=GenerateResponse)
async def generate(
    req: GenerateRequest,
    user: AuthUser = Depends(require_user),
    svc: GenerationService = Depends(get_generation_service),
):
    return await svc.generate(user, req)


@router.post("/generate-stream")
async def generate_stream(
    req: GenerateRequest,
    user: AuthUser = Depends(require_user),
    svc: GenerationService = Depends(get_generation_service),
):
    async def events():
        async for event in svc.generate_events(user, req):
            yield f"data: {json.dumps(event)}\n\n"

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
