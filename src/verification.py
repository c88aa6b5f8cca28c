"""
QuickJob - Verification Aggregation

Derives an account's overall trust status from its four verification
steps and its current credentials, and applies the side effects of
status transitions (is_verified flag, notifications).

The derivation functions are pure; every mutating entry point ends with
``reevaluate()`` so overall_status is never left stale.
"""

import logging
from typing import Iterable, List, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import get_account_by_id
from src.errors import NotFound, ValidationError
from src.models.account import Account, AccountRole
from src.models.credential import Credential
from src.models.notification import NotificationTab
from src.models.verification import VerificationRecord, ReviewStatus, VerificationStep
from src.notifications import NotificationEmitter

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "🎉 Your account has been successfully verified!"
FAILURE_PREFIX = "⚠️ Verification failed: "


# =============================================================================
# PURE DERIVATIONS
# =============================================================================

def derive_credentials_status(statuses: Iterable[str]) -> str:
    """
    Aggregate credential statuses.

    No credentials -> pending; all success -> success; any failed ->
    failed; otherwise pending.
    """
    statuses = list(statuses)
    if not statuses:
        return ReviewStatus.PENDING
    if all(s == ReviewStatus.SUCCESS for s in statuses):
        return ReviewStatus.SUCCESS
    if any(s == ReviewStatus.FAILED for s in statuses):
        return ReviewStatus.FAILED
    return ReviewStatus.PENDING


def derive_overall_status(id_photo_status: str, selfie_status: str, credentials_status: str) -> str:
    """Failed wins over everything; success needs all three steps to succeed."""
    steps = (id_photo_status, selfie_status, credentials_status)
    if ReviewStatus.FAILED in steps:
        return ReviewStatus.FAILED
    if all(s == ReviewStatus.SUCCESS for s in steps):
        return ReviewStatus.SUCCESS
    return ReviewStatus.PENDING


def describe_failures(record: VerificationRecord, credentials: Iterable[Credential]) -> str:
    """Build the notification text listing every rejected item."""
    reasons = []
    if record.id_photo_status == ReviewStatus.FAILED:
        reasons.append("ID photo rejected")
    if record.selfie_status == ReviewStatus.FAILED:
        reasons.append("Selfie rejected")
    for credential in credentials:
        if credential.status == ReviewStatus.FAILED:
            reasons.append(f"Certificate rejected: {credential.name or 'Unnamed certificate'}")
    return FAILURE_PREFIX + ", ".join(reasons)


# =============================================================================
# RECORD ACCESS
# =============================================================================

async def get_verification_record(db: AsyncSession, user_id: int) -> Optional[VerificationRecord]:
    result = await db.execute(
        select(VerificationRecord).where(VerificationRecord.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_account_credentials(db: AsyncSession, user_id: int) -> List[Credential]:
    """All credentials for an account, newest first."""
    result = await db.execute(
        select(Credential)
        .where(Credential.user_id == user_id)
        .order_by(Credential.uploaded_at.desc(), Credential.id.desc())
    )
    return list(result.scalars().all())


async def require_account(db: AsyncSession, user_id: int) -> Account:
    account = await get_account_by_id(db, user_id)
    if not account:
        raise NotFound("Account not found")
    return account


async def init_verification(db: AsyncSession, user_id: int) -> Tuple[VerificationRecord, bool]:
    """
    Create the verification record if it does not exist.

    Returns (record, created). An existing record is returned untouched.
    The caller commits.
    """
    await require_account(db, user_id)

    record = await get_verification_record(db, user_id)
    if record:
        return record, False

    record = VerificationRecord(
        user_id=user_id,
        email_status=ReviewStatus.SUCCESS,
        id_photo_status=ReviewStatus.PENDING,
        selfie_status=ReviewStatus.PENDING,
        credentials_status=ReviewStatus.PENDING,
        overall_status=ReviewStatus.PENDING,
    )
    db.add(record)
    await db.flush()
    logger.info("Verification initialized for account %s", user_id)
    return record, True


async def get_verification_summary(db: AsyncSession, user_id: int) -> dict:
    """Step statuses for display; defaults when no record exists yet."""
    record = await get_verification_record(db, user_id)
    if not record:
        return {
            "email": ReviewStatus.SUCCESS,
            "idPhoto": ReviewStatus.PENDING,
            "selfie": ReviewStatus.PENDING,
            "credentials": ReviewStatus.PENDING,
            "overall": ReviewStatus.PENDING,
        }
    return record.to_summary()


# =============================================================================
# AGGREGATION
# =============================================================================

async def reevaluate(
    db: AsyncSession,
    account: Account,
    emitter: NotificationEmitter,
    record: Optional[VerificationRecord] = None,
) -> VerificationRecord:
    """
    Recompute credentials_status and overall_status for an account and
    apply transition side effects.

    Creates the record if it is missing. Nothing is committed here.
    """
    if record is None:
        record, _ = await init_verification(db, account.id)

    credentials = await get_account_credentials(db, account.id)
    previous = record.overall_status

    record.credentials_status = derive_credentials_status(c.status for c in credentials)
    overall = derive_overall_status(
        record.id_photo_status,
        record.selfie_status,
        record.credentials_status,
    )
    record.overall_status = overall

    if overall != previous:
        logger.info("Account %s verification %s -> %s", account.id, previous, overall)

    if overall == ReviewStatus.SUCCESS and not account.is_verified:
        account.is_verified = True
        await emitter.emit(account, SUCCESS_MESSAGE, NotificationTab.VERIFICATION)

    if overall == ReviewStatus.FAILED:
        # Entering failed, or a different set of rejections while failed
        notice = describe_failures(record, credentials)
        if notice != record.failure_notice:
            record.failure_notice = notice
            await emitter.emit(account, notice, NotificationTab.VERIFICATION)
    else:
        record.failure_notice = None

    await db.flush()
    return record


async def review(
    db: AsyncSession,
    emitter: NotificationEmitter,
    user_id: int,
    step: str,
    status: str,
    credential_id: Optional[int] = None,
) -> Tuple[VerificationRecord, List[Credential]]:
    """
    Apply an admin decision to one verification step, then re-aggregate.

    For the credentials step a credential id is required and only that
    credential's status changes; credentials_status is always re-derived
    from the credential rows, never written directly.

    Returns the updated record and the account's credentials. The caller
    commits.
    """
    if step not in VerificationStep.REVIEWABLE:
        raise ValidationError(f"Invalid verification step: {step}")
    if status not in ReviewStatus.ALL:
        raise ValidationError(f"Invalid status: {status}")

    account = await require_account(db, user_id)
    record, _ = await init_verification(db, user_id)

    if step == VerificationStep.CREDENTIALS:
        if credential_id is None:
            raise ValidationError("credentialId is required when reviewing credentials")
        result = await db.execute(
            select(Credential)
            .where(Credential.id == credential_id)
            .where(Credential.user_id == user_id)
        )
        credential = result.scalar_one_or_none()
        if not credential:
            raise NotFound("Credential not found")
        credential.status = status
        await db.flush()
    else:
        setattr(record, f"{step}_status", status)

    record = await reevaluate(db, account, emitter, record=record)
    credentials = await get_account_credentials(db, user_id)
    return record, credentials


# =============================================================================
# ADMIN VIEWS
# =============================================================================

async def list_professionals_with_status(db: AsyncSession) -> List[dict]:
    """Every professional, newest first, with their verification statuses."""
    result = await db.execute(
        select(Account, VerificationRecord)
        .outerjoin(VerificationRecord, VerificationRecord.user_id == Account.id)
        .where(Account.role == AccountRole.PROFESSIONAL)
        .order_by(Account.created_at.desc(), Account.id.desc())
    )
    professionals = []
    for account, record in result.all():
        professionals.append({
            "id": account.id,
            "name": account.name,
            "email": account.email,
            "profession": account.profession,
            "id_photo": account.id_photo,
            "selfie": account.selfie,
            "is_verified": account.is_verified,
            "id_photo_status": record.id_photo_status if record else None,
            "selfie_status": record.selfie_status if record else None,
            "credentials_status": record.credentials_status if record else None,
            "overall_status": record.overall_status if record else None,
        })
    return professionals
