# storefront/data/seed.py
from sqlalchemy.orm import sessionmaker

from storefront.data.database import SessionLocal
from storefront.domain.schemas import UserCreate
from storefront.repos.user_repo import UserRepo
from storefront.services.user_service import UserService
from storefront.utils.settings import ADMIN_EMAIL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def seed(admin_email: str | None = ADMIN_EMAIL, session_factory: sessionmaker = SessionLocal):
    """Tworzy konto ADMIN dla endpointow synchronizacji, tylko jesli go jeszcze nie ma."""
    if not admin_email:
        return None

    db = session_factory()
    try:
        payload = UserCreate(email=admin_email, first_name="Admin", last_name="Storefront")
        if UserRepo(db).get_by_email(payload.email):
            return None
        admin = UserService(db).register(payload, role="ADMIN")
        logger.info(f"Seeded admin user {admin.email} (id {admin.id})")
        return admin
    finally:
        db.close()
