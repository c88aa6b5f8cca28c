"""
QuickJob - Verification Routes

Account verification status, admin review and the admin professional
overview.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import require_admin
from src.database import get_db, atomic
from src.models.account import Account
from src.notifications import NotificationEmitter, get_emitter
from src.schemas import VerificationInitRequest, VerificationReviewRequest
from src.verification import (
    get_account_credentials,
    get_verification_summary,
    init_verification,
    list_professionals_with_status,
    require_account,
    review,
)


router = APIRouter(tags=["verification"])


@router.post("/verification/init")
async def init(
    body: VerificationInitRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create the verification record. Safe to call repeatedly."""
    async with atomic(db):
        _, created = await init_verification(db, body.userId)
    if not created:
        return {"success": True, "message": "Already exists"}
    return {"success": True}


@router.post("/verification/review")
async def review_step(
    body: VerificationReviewRequest,
    db: AsyncSession = Depends(get_db),
    emitter: NotificationEmitter = Depends(get_emitter),
    admin: Account = Depends(require_admin),
):
    """Admin decision on one verification step or one credential."""
    async with atomic(db):
        record, credentials = await review(
            db,
            emitter,
            user_id=body.userId,
            step=body.step,
            status=body.status,
            credential_id=body.credentialId,
        )
    await emitter.flush_email()

    return {
        "success": True,
        "verification": record.to_dict(),
        "credentials": [
            {
                "id": c.id,
                "name": c.name,
                "status": c.status,
                "file_path": c.file_path,
            }
            for c in credentials
        ],
    }


@router.get("/verification/credentials/{user_id}")
async def verification_credentials(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    credentials = await get_account_credentials(db, user_id)
    return [{"id": c.id, "file_path": c.file_path, "status": c.status} for c in credentials]


@router.get("/verification/{user_id}")
async def verification_status(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Current step statuses for an account."""
    return await get_verification_summary(db, user_id)


# =============================================================================
# ADMIN
# =============================================================================

@router.get("/admin/professionals")
async def admin_professionals(
    db: AsyncSession = Depends(get_db),
    admin: Account = Depends(require_admin),
):
    return await list_professionals_with_status(db)


@router.get("/admin/professionals/{user_id}/credentials")
async def admin_professional_credentials(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin: Account = Depends(require_admin),
):
    await require_account(db, user_id)
    credentials = await get_account_credentials(db, user_id)
    return [credential.to_dict() for credential in credentials]
