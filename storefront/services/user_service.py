from sqlalchemy.orm import Session
from storefront.data.models.user import UserModel
from storefront.domain.errors import ConflictError, NotFoundError
from storefront.domain.schemas import UserCreate, UserRead
from storefront.repos.cart_repo import CartRepo
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)
        self.carts = CartRepo(db)

    def register(self, payload: UserCreate, role: str = "CUSTOMER") -> UserRead:
        if self.repo.get_by_email(payload.email):
            raise ConflictError("Email already registered", {"email": payload.email})

        try:
            user = self.repo.create_user(
                UserModel(
                    email=payload.email,
                    first_name=payload.first_name,
                    last_name=payload.last_name,
                    role=role,
                )
            )
            # koszyk powstaje razem z uzytkownikiem
            self.carts.create_cart(user.id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(f"Failed to register user {payload.email}")
            raise

        logger.info(
            f"User registered: {user.email}",
            extra={"context": {"user_id": user.id, "role": role}},
        )
        return UserRead.model_validate(user)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found", {"user_id": user_id})
        return UserRead.model_validate(user)

    def get_active_user(self, user_id: int) -> UserModel | None:
        user = self.repo.get_user(user_id)
        return user if user and user.is_active else None
