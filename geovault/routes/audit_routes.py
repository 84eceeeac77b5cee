"""Audit reporting API routes (administrators only)."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from common.constants import DEFAULT_AUDIT_PAGE_SIZE, MAX_AUDIT_PAGE_SIZE
from geovault.auth import require_admin
from geovault.repositories.audit_repository import AuditRepository
from geovault.repositories.user_repository import User
from geovault.schemas.audit import AuditEntryResponse, ListAuditResponse

router = APIRouter(prefix="/audit", tags=["Audit"])


@router.get("", response_model=ListAuditResponse)
async def list_audit_entries(
    file_id: Optional[str] = Query(None),
    requester_id: Optional[str] = Query(None),
    granted: Optional[bool] = Query(None),
    limit: int = Query(DEFAULT_AUDIT_PAGE_SIZE, ge=1, le=MAX_AUDIT_PAGE_SIZE),
    admin: User = Depends(require_admin),
):
    """
    Read access attempts, newest first.

    Parameters:
        - file_id: Only attempts on this file
        - requester_id: Only attempts by this user
        - granted: true for granted attempts, false for denied ones
        - limit: Maximum number of entries (1-1000)
    """
    entries = AuditRepository.query(
        file_id=file_id,
        requester_id=requester_id,
        granted=granted,
        limit=limit,
    )
    return ListAuditResponse(entries=[AuditEntryResponse.from_entry(e) for e in entries])
