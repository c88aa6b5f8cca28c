"""
QuickJob - Authentication Logic
"""

import hashlib
import secrets
from typing import Optional
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Request, Depends

from src.config import settings
from src.database import get_db
from src.errors import Unauthorized, Forbidden, ValidationError
from src.models.account import Account

# Access token serializer
serializer = URLSafeTimedSerializer(settings.SECRET_KEY, salt="quickjob-access-token")


# =============================================================================
# PASSWORD UTILITIES
# =============================================================================

def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-SHA256."""
    salt = secrets.token_hex(16)
    pwd_hash = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt.encode('utf-8'),
        100000  # iterations
    ).hex()
    return f"{salt}${pwd_hash}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        salt, stored_hash = hashed_password.split('$')
        pwd_hash = hashlib.pbkdf2_hmac(
            'sha256',
            plain_password.encode('utf-8'),
            salt.encode('utf-8'),
            100000
        ).hex()
        return secrets.compare_digest(pwd_hash, stored_hash)
    except ValueError:
        return False


def generate_verification_code() -> str:
    """Six-digit numeric code emailed to confirm an address."""
    return str(100000 + secrets.randbelow(900000))


# =============================================================================
# ACCESS TOKENS
# =============================================================================

def create_access_token(account_id: int, role: str) -> str:
    """Issue a signed token carrying the account id and role."""
    return serializer.dumps({"account_id": account_id, "role": role})


def verify_access_token(token: str, max_age: int = None) -> Optional[dict]:
    """
    Verify and decode an access token.

    Args:
        token: The token to verify
        max_age: Maximum age in seconds (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        The decoded data if valid, None if invalid/expired
    """
    if max_age is None:
        max_age = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    try:
        return serializer.loads(token, max_age=max_age)
    except (BadSignature, SignatureExpired):
        return None


# =============================================================================
# ACCOUNT OPERATIONS
# =============================================================================

async def get_account_by_email(db: AsyncSession, email: str) -> Optional[Account]:
    """Get an account by email address."""
    result = await db.execute(
        select(Account).where(Account.email == email.lower().strip())
    )
    return result.scalar_one_or_none()


async def get_account_by_id(db: AsyncSession, account_id: int) -> Optional[Account]:
    """Get an account by ID."""
    result = await db.execute(
        select(Account).where(Account.id == account_id)
    )
    return result.scalar_one_or_none()


async def create_account(
    db: AsyncSession,
    role: str,
    name: str,
    email: str,
    password: str,
    contact: Optional[str] = None,
    profession: Optional[str] = None,
    id_photo: Optional[str] = None,
    selfie: Optional[str] = None,
) -> Account:
    """
    Create a new client or professional account.

    The caller commits. Raises ValidationError if the email is taken.
    """
    if await get_account_by_email(db, email):
        raise ValidationError("Email already registered")

    account = Account(
        role=role,
        name=name.strip(),
        email=email.lower().strip(),
        password_hash=hash_password(password),
        contact=contact.strip() if contact else None,
        profession=profession.strip() if profession else None,
        id_photo=id_photo,
        selfie=selfie,
        verification_code=generate_verification_code(),
        email_verified=False,
        is_verified=False,
    )
    db.add(account)
    await db.flush()
    return account


async def authenticate_account(db: AsyncSession, email: str, password: str) -> Optional[Account]:
    """
    Authenticate an account by email and password.

    Returns the account if authentication succeeds, None otherwise.
    """
    account = await get_account_by_email(db, email)
    if not account:
        return None
    if not verify_password(password, account.password_hash):
        return None
    return account


# =============================================================================
# REQUEST AUTHENTICATION
# =============================================================================

def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def get_current_account(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Account:
    """
    Resolve the account from the bearer token.

    Raises Unauthorized if the token is missing, invalid or expired, or the
    account no longer exists.
    """
    token = _bearer_token(request)
    if not token:
        raise Unauthorized()

    data = verify_access_token(token)
    if not data or not data.get("account_id"):
        raise Unauthorized("Invalid or expired token")

    account = await get_account_by_id(db, data["account_id"])
    if not account:
        raise Unauthorized("Invalid or expired token")
    return account


async def require_admin(account: Account = Depends(get_current_account)) -> Account:
    """Dependency for admin-only routes."""
    if not account.is_admin:
        raise Forbidden()
    return account
