from fastapi import APIRouter, Depends, Query

from hep_companion.api.deps import get_organization_service
from hep_companion.auth.deps import require_user
from hep_companion.auth.session import AuthUser
from hep_companion.core.errors import bad_request
from hep_companion.schemas.organization import OrganizationCreate
from hep_companion.services.organization_service import OrganizationService

router = APIRouter(prefix="/api/organizations", tags=["Organizations"])


@router.post("")
def select_or_create_organization(
    payload: OrganizationCreate,
    user: AuthUser = Depends(require_user),
    svc: OrganizationService = Depends(get_organization_service),
):
    org = svc.select_or_create(user, payload)
    return {"success": True, "data": org.model_dump()}


@router.get("/search", dependencies=[Depends(require_user)])
def search_organizations(
    query: str = Query(..., max_length=100),
    svc: OrganizationService = Depends(get_organization_service),
):
    term = query.strip()
    if not term:
        raise bad_request(message="Search query is required")
    return {"success": True, "data": svc.search(term)}
