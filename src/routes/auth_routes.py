"""
QuickJob - Authentication Routes

Signup, email confirmation, login and admin login.
"""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Form, UploadFile, File
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import (
    authenticate_account,
    create_access_token,
    create_account,
    generate_verification_code,
    get_account_by_email,
)
from src.database import get_db, atomic
from src.errors import NotFound, ValidationError, Unauthorized, Forbidden
from src.mailer import Mailer, get_mailer, send_verification_email
from src.models.account import AccountRole
from src.schemas import LoginRequest, VerifyEmailRequest
from src.uploads import discard_on_error, save_optional_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

MIN_PASSWORD_LENGTH = 8


async def _check_signup(db: AsyncSession, email: str, password: str) -> None:
    """Reject bad signups before any upload is written to disk."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if await get_account_by_email(db, email):
        raise ValidationError("Email already registered")


# =============================================================================
# SIGNUP
# =============================================================================

@router.post("/signup-client")
async def signup_client(
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    contact: Optional[str] = Form(None),
    idPhoto: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
):
    """Register a client account."""
    await _check_signup(db, email, password)
    id_photo = await save_optional_upload(idPhoto)

    async with discard_on_error(id_photo), atomic(db):
        account = await create_account(
            db,
            role=AccountRole.CLIENT,
            name=name,
            email=email,
            password=password,
            contact=contact,
            id_photo=id_photo,
        )

    logger.info("Client account %s registered", account.id)
    return {"success": True, "message": "Client registered. Please log in to verify your account."}


@router.post("/signup-professional")
async def signup_professional(
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    profession: Optional[str] = Form(None),
    idPhoto: Optional[UploadFile] = File(None),
    selfie: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
):
    """Register a professional account with ID photo and selfie."""
    await _check_signup(db, email, password)
    id_photo_path = await save_optional_upload(idPhoto)
    async with discard_on_error(id_photo_path):
        selfie_path = await save_optional_upload(selfie)

    async with discard_on_error(id_photo_path, selfie_path), atomic(db):
        account = await create_account(
            db,
            role=AccountRole.PROFESSIONAL,
            name=name,
            email=email,
            password=password,
            profession=profession,
            id_photo=id_photo_path,
            selfie=selfie_path,
        )

    logger.info("Professional account %s registered", account.id)
    return {"success": True, "message": "Professional registered. Please log in to verify your account."}


# =============================================================================
# EMAIL CONFIRMATION
# =============================================================================

@router.post("/verify")
async def verify_email(
    body: VerifyEmailRequest,
    db: AsyncSession = Depends(get_db),
):
    """Confirm an email address with the emailed code."""
    account = await get_account_by_email(db, body.email)
    if not account:
        raise NotFound("Email not found")

    code = body.code.strip()
    if not account.verification_code or not secrets.compare_digest(account.verification_code, code):
        raise ValidationError("Invalid code")

    async with atomic(db):
        account.email_verified = True
        account.verification_code = None

    return {
        "success": True,
        "id": account.id,
        "name": account.name,
        "email": account.email,
        "role": account.role,
    }


# =============================================================================
# LOGIN
# =============================================================================

@router.post("/login")
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    """
    Log in a client or professional.

    An unconfirmed email gets a fresh code instead of a token.
    """
    account = await authenticate_account(db, body.email, body.password)
    if not account:
        raise Unauthorized("Invalid credentials")

    if not account.email_verified:
        async with atomic(db):
            account.verification_code = generate_verification_code()
        await send_verification_email(mailer, account.email, account.verification_code)
        return {
            "success": False,
            "needsVerification": True,
            "message": "A verification code was sent to your email.",
        }

    return {
        "success": True,
        "id": account.id,
        "role": account.role,
        "email": account.email,
        "name": account.name,
        "token": create_access_token(account.id, account.role),
    }


@router.post("/auth/admin-login")
async def admin_login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Log in an admin and issue a token."""
    account = await authenticate_account(db, body.email, body.password)
    if not account:
        raise Unauthorized("Invalid email or password")
    if not account.is_admin:
        raise Forbidden("Not an admin account")

    return {
        "success": True,
        "user": {
            "id": account.id,
            "name": account.name,
            "email": account.email,
            "role": account.role,
        },
        "token": create_access_token(account.id, account.role),
    }
