# storefront/api/deps.py
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import ForbiddenError, UnauthorizedError
from storefront.domain.schemas import Identity
from storefront.services.task_service import TaskService
from storefront.services.user_service import UserService


def get_current_user(
    x_user_id: int | None = Header(default=None),
    db: Session = Depends(get_db),
) -> Identity:
    """Tozsamosc wywolujacego juz uwierzytelniona upstream; tu tylko id -> aktywny user."""
    if x_user_id is None:
        raise UnauthorizedError("Missing caller identity")

    user = UserService(db).get_active_user(x_user_id)
    if not user:
        raise UnauthorizedError("Unknown or inactive user", {"user_id": x_user_id})

    return Identity(id=user.id, role=user.role)


def require_admin(user: Identity = Depends(get_current_user)) -> Identity:
    if not user.is_admin:
        raise ForbiddenError("Administrator role required", {"user_id": user.id})
    return user


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service
