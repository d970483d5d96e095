"""
Teacher credentials and session tokens.

Passwords are stored as bcrypt hashes. A successful login yields a signed JWT
whose claims identify the teacher; every authenticated request turns that
token back into TokenClaims.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt as _bcrypt
from jose import JWTError, jwt

from quizgen import config

ALGORITHM = "HS256"
TOKEN_TTL = timedelta(minutes=60)
TEACHER_ROLE = "teacher"


@dataclass(frozen=True)
class TokenClaims:
    teacher_id: int
    role: str
    email: Optional[str] = None

    @property
    def is_teacher(self) -> bool:
        return self.role == TEACHER_ROLE


# ─── Passwords ────────────────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    return _bcrypt.hashpw(password.encode("utf-8"), _bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return _bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


# ─── Tokens ───────────────────────────────────────────────────────────────────

def issue_token(teacher_id: int, email: Optional[str] = None, role: str = TEACHER_ROLE,
                ttl: Optional[timedelta] = None) -> str:
    """Sign a session token for one teacher."""
    claims = {
        "sub": str(teacher_id),
        "role": role,
        "exp": datetime.now(timezone.utc) + (ttl or TOKEN_TTL),
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, config.JWT_SECRET_KEY, algorithm=ALGORITHM)


def read_token(token: str) -> Optional[TokenClaims]:
    """Claims of a valid token; None when the token is forged, expired or has no usable subject."""
    try:
        payload = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[ALGORITHM])
        return TokenClaims(
            teacher_id=int(payload["sub"]),
            role=payload.get("role", ""),
            email=payload.get("email"),
        )
    except (JWTError, KeyError, ValueError, TypeError):
        return None
