from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from stitchhub.core.database import get_db
from stitchhub.core.security import verify_password, get_password_hash, create_access_token
from stitchhub.models.user import User, UserRole
from stitchhub.schemas.user import SignupRequest, Token, UserResponse
from stitchhub.api.deps import get_current_user
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _token_for(user: User) -> dict:
    return {
        "access_token": create_access_token(user.id, user.role),
        "token_type": "bearer",
        "user": user,
    }


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """Log in with email (as ``username``) and password."""
    email = form_data.username.strip().lower()
    user = db.query(User).filter(User.email == email).first()

    if not user or not verify_password(form_data.password, user.hashed_password):
        logger.warning(f"Failed login attempt for {email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info(f"User {user.id} logged in")
    return _token_for(user)


@router.post("/signup", response_model=Token, status_code=status.HTTP_201_CREATED)
async def signup(
    data: SignupRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new account.

    The first OWNER can sign up on their own; once an OWNER exists, further
    owners must be created from the users endpoints.
    """
    email = data.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered"
        )

    role = data.role or UserRole.WORKER
    if role == UserRole.OWNER:
        owner_exists = db.query(User.id).filter(User.role == UserRole.OWNER.value).first()
        if owner_exists:
            logger.warning(f"Rejected OWNER signup for {email}: an owner already exists")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="An owner account already exists"
            )

    user = User(
        email=email,
        name=data.name.strip(),
        hashed_password=get_password_hash(data.password),
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"User {user.id} signed up as {user.role}")
    return _token_for(user)


@router.get("/me", response_model=UserResponse)
async def read_me(current_user: User = Depends(get_current_user)):
    return current_user
