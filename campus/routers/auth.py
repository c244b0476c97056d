from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import ActingUser, get_acting_user
from ..schemas.auth_schemas import LoginRequest, TokenResponse, UserRead
from ..schemas.base import Envelope
from ..services.user_service import UserService

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

@router.post("/login", response_model=Envelope[TokenResponse])
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Exchange email and password for a bearer token"""
    service = UserService(db)
    user = await service.authenticate(credentials.email, credentials.password)
    token = service.issue_token(user)
    return Envelope(data=TokenResponse(access_token=token, user=UserRead.model_validate(user)))

@router.get("/me", response_model=Envelope[UserRead])
async def me(
    actor: ActingUser = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db)
):
    """Current user"""
    user = await UserService(db).get_or_404(actor.id)
    return Envelope(data=UserRead.model_validate(user))
