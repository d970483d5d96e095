"""
Teacher authentication router.
Login and profile; also provides the current-teacher and session dependencies.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from quizgen.auth.security import issue_token, read_token, verify_password
from quizgen.database.database import get_db
from quizgen.database.models import Teacher
from quizgen.persistence import SessionContext

router = APIRouter(prefix="/auth/teacher", tags=["auth-teacher"])


# ─── Schemas ───────────────────────────────────────────────────────────────────

class TeacherLoginRequest(BaseModel):
    email: str
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    teacher: dict

class TeacherProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: str
    is_admin: bool
    is_active: bool


# ─── Dependencies ──────────────────────────────────────────────────────────────

security_scheme = HTTPBearer()


def get_current_teacher(
    credentials: HTTPAuthorizationCredentials = Depends(security_scheme),
    db: Session = Depends(get_db),
) -> Teacher:
    claims = read_token(credentials.credentials)
    if claims is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    if not claims.is_teacher:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Teacher access required")

    teacher = db.query(Teacher).filter(Teacher.id == claims.teacher_id).first()
    if not teacher or not teacher.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Teacher not found or inactive")
    return teacher


def get_session_context(teacher: Teacher = Depends(get_current_teacher)) -> SessionContext:
    return SessionContext(teacher_id=teacher.id)


# ─── Routes ────────────────────────────────────────────────────────────────────

@router.post("/login", response_model=TokenResponse)
def teacher_login(request: TeacherLoginRequest, db: Session = Depends(get_db)):
    """Authenticate teacher and return an access token."""
    teacher = db.query(Teacher).filter(Teacher.email == request.email).first()
    if not teacher or not verify_password(request.password, teacher.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    if not teacher.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

    access_token = issue_token(teacher.id, email=teacher.email)
    return TokenResponse(
        access_token=access_token,
        teacher={
            "id": teacher.id,
            "email": teacher.email,
            "full_name": teacher.full_name,
            "is_admin": teacher.is_admin,
        },
    )


@router.get("/me", response_model=TeacherProfileResponse)
def teacher_me(teacher: Teacher = Depends(get_current_teacher)):
    """Get current teacher profile."""
    return teacher
