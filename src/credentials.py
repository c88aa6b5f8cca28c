"""
QuickJob - Credential Store

Upload, list and remove credential documents. Removing a credential
always re-aggregates the owner's verification status.
"""

import logging
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.errors import NotFound
from src.models.credential import Credential
from src.models.verification import ReviewStatus
from src.notifications import NotificationEmitter
from src.verification import (
    get_account_credentials,
    get_verification_record,
    reevaluate,
    require_account,
)

logger = logging.getLogger(__name__)


async def get_credential_by_id(db: AsyncSession, credential_id: int) -> Optional[Credential]:
    result = await db.execute(
        select(Credential).where(Credential.id == credential_id)
    )
    return result.scalar_one_or_none()


async def create_credential(
    db: AsyncSession,
    emitter: NotificationEmitter,
    user_id: int,
    file_path: str,
    name: Optional[str] = None,
) -> Credential:
    """
    Record a stored file as a pending credential.

    If verification has been initialized, it is re-aggregated so a new
    pending credential pulls credentials_status back to pending. The
    caller commits.
    """
    account = await require_account(db, user_id)

    credential = Credential(
        user_id=user_id,
        file_path=file_path,
        name=name.strip() if name else None,
        status=ReviewStatus.PENDING,
    )
    db.add(credential)
    await db.flush()

    record = await get_verification_record(db, user_id)
    if record:
        await reevaluate(db, account, emitter, record=record)

    return credential


async def list_credentials(db: AsyncSession, user_id: int) -> List[Credential]:
    """Credentials for an account, newest upload first."""
    return await get_account_credentials(db, user_id)


async def remove_credential(
    db: AsyncSession,
    emitter: NotificationEmitter,
    credential_id: int,
) -> int:
    """
    Delete a credential and re-aggregate its owner's verification.

    Returns the owner's account id. Raises NotFound for an unknown id.
    The caller commits.
    """
    credential = await get_credential_by_id(db, credential_id)
    if not credential:
        raise NotFound("Credential not found")

    user_id = credential.user_id
    account = await require_account(db, user_id)

    await db.delete(credential)
    await db.flush()
    logger.info("Credential %s removed for account %s", credential_id, user_id)

    await reevaluate(db, account, emitter)
    return user_id
