"""
Audit Route — GET /audit/recent
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ipscore.api.dependencies import get_audit_logger
from ipscore.audit.logger import AuditLogger

router = APIRouter()


@router.get("/audit/recent")
async def recent_audit(
    count: int = Query(default=50, ge=1, le=1000),
    audit: AuditLogger = Depends(get_audit_logger),
) -> list[dict]:
    """Most recent analysis audit records, oldest first."""
    return audit.read_recent(count)
