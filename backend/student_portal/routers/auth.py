# student_portal/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database.session import get_db
from ..schemas.user import LoginRequest, SignupRequest, TokenResponse, UserOut
from ..services.auth_service import AuthService, CallerSession, create_access_token
from .deps import require_session

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=TokenResponse, status_code=201)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    user = AuthService.signup(
        db,
        email=payload.email,
        password=payload.password,
        full_name_ar=payload.full_name_ar,
        full_name_en=payload.full_name_en,
        phone_number=payload.phone_number,
    )
    return {"access_token": create_access_token(CallerSession.for_user(user)), "user": user}


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = AuthService.login(db, payload.email, payload.password)
    return {"access_token": create_access_token(CallerSession.for_user(user)), "user": user}


@router.get("/me", response_model=UserOut)
def me(session: CallerSession = Depends(require_session), db: Session = Depends(get_db)):
    return AuthService.get_user(db, session)
