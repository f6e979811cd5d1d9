"""
organization_service.py
- Purpose: Attach the signed-in clinician to a clinic, creating the
  organization on first use.
"""

import logging
import secrets
import string

from hep_companion.auth.session import AuthUser
from hep_companion.constants.audit import AuditAction, ResourceType
from hep_companion.core import AppError
from hep_companion.repos.organization.read import OrganizationReadRepo
from hep_companion.repos.organization.write import OrganizationWriteRepo
from hep_companion.repos.profile.write import ProfileWriteRepo
from hep_companion.schemas.organization import OrganizationCreate, OrganizationOut
from hep_companion.services.audit_service import AuditService

logger = logging.getLogger("hep_companion.organization_service")

CLINIC_ID_PREFIX = "CLINIC"
_CLINIC_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_clinic_id() -> str:
    suffix = "".join(secrets.choice(_CLINIC_ID_ALPHABET) for _ in range(6))
    return f"{CLINIC_ID_PREFIX}-{suffix}"


class OrganizationService:
    def __init__(self, client):
        self.org_read = OrganizationReadRepo(client)
        self.org_write = OrganizationWriteRepo(client)
        self.profile_write = ProfileWriteRepo(client)
        self.audit = AuditService(client)

    def _find_existing(self, payload: OrganizationCreate) -> dict | None:
        if payload.clinic_id:
            found = self.org_read.get_by_clinic_id(payload.clinic_id)
            if found:
                return found
        return self.org_read.get_by_name(payload.name)

    def select_or_create(self, user: AuthUser, payload: OrganizationCreate) -> OrganizationOut:
        existing = self._find_existing(payload)
        if existing:
            org = OrganizationOut(
                id=str(existing["id"]),
                name=existing["name"],
                clinic_id=existing.get("clinic_id"),
                created=False,
            )
        else:
            row = self.org_write.create(
                name=payload.name,
                clinic_id=payload.clinic_id or generate_clinic_id(),
            )
            org = OrganizationOut(id=str(row["id"]), name=row["name"], clinic_id=row.get("clinic_id"), created=True)

        try:
            self.profile_write.set_organization(user.id, clinic_id=org.clinic_id, organization=org.name)
        except AppError:
            # non-fatal
            logger.exception("profile_update_failed", extra={"organization_id": org.id})

        self.audit.log(
            user_id=user.id,
            action=AuditAction.CREATE if org.created else AuditAction.SELECT,
            resource_type=ResourceType.ORGANIZATION,
            resource_id=org.id,
            details={
                "organization_name": org.name,
                "clinic_id": org.clinic_id,
                "was_created": org.created,
            },
        )
        return org

    def search(self, query: str) -> list[dict]:
        return self.org_read.search(query) or []
