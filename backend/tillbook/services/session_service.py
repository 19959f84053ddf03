# Overview: Service-layer operations for session tokens.

"""
Bearer token sessions for staff.

- 32 bytes of entropy from secrets.token_hex
- Stored as SHA-256 hashes
- Absolute lifetime of SESSION_TTL_HOURS
- Revocable on logout or when the staff account is deactivated
"""

import hashlib
import secrets
from datetime import timedelta

from flask import current_app

from ..extensions import db
from ..models import SessionToken, Staff
from tillbook.time_utils import utcnow


def generate_token() -> str:
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def create_session(staff_id: int) -> tuple[SessionToken, str]:
    """
    Create a session for a staff member.

    Returns (session_record, plaintext_token). Only the hash is stored.
    """
    staff = db.session.get(Staff, staff_id)
    if not staff or not staff.is_active:
        raise ValueError("Staff not found")

    plaintext_token = generate_token()
    now = utcnow()
    ttl = timedelta(hours=current_app.config.get("SESSION_TTL_HOURS", 24))

    session = SessionToken(
        staff_id=staff.id,
        token_hash=hash_token(plaintext_token),
        created_at=now,
        expires_at=now + ttl,
        is_revoked=False,
    )
    db.session.add(session)
    db.session.commit()

    return session, plaintext_token


def validate_session(token: str) -> Staff | None:
    """
    Resolve a bearer token to its staff member.

    Returns None for unknown, expired or revoked tokens, and for
    deactivated staff (whose session is revoked on the spot).
    """
    session = db.session.query(SessionToken).filter_by(
        token_hash=hash_token(token),
        is_revoked=False,
    ).first()

    if not session:
        return None

    now = utcnow()
    if session.expires_at < now:
        return None

    staff = session.staff
    if not staff or not staff.is_active:
        session.is_revoked = True
        session.revoked_at = now
        db.session.commit()
        return None

    return staff


def revoke_session(token: str) -> bool:
    """Returns True if a live session was revoked."""
    session = db.session.query(SessionToken).filter_by(
        token_hash=hash_token(token),
        is_revoked=False,
    ).first()

    if not session:
        return False

    session.is_revoked = True
    session.revoked_at = utcnow()
    db.session.commit()
    return True
