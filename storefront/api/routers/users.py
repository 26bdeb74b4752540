from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.services.user_service import UserService
from storefront.domain.schemas import Identity, UserCreate, UserRead

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead, status_code=201)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    service = UserService(db)
    return service.register(payload)


@router.get("/me", response_model=UserRead)
def get_me(user: Identity = Depends(get_current_user), db: Session = Depends(get_db)):
    service = UserService(db)
    return service.get_user(user.id)
