"""
Database Setup Script
Creates all tables and the development users (one per role)

Run directly to prepare a fresh database:

    python -m expense_manager.database.setup_database
"""

from typing import List

from sqlalchemy.orm import Session

from expense_manager.config.settings import settings
from expense_manager.config.database import Base, SessionLocal, engine
from expense_manager.models.lifecycle import UserRole
from expense_manager.models.user import User
from expense_manager.utils.security import get_password_hash
from expense_manager.utils.logger import setup_logger

logger = setup_logger()


DEV_USERS = [
    {"full_name": "John Smith", "email": "john.smith@company.com", "role": UserRole.EMPLOYEE},
    {"full_name": "Robert Taylor", "email": "robert.taylor@company.com", "role": UserRole.MANAGER},
    {"full_name": "David Brown", "email": "david.brown@company.com", "role": UserRole.FINANCE},
]


def create_tables():
    """Create all database tables"""
    import expense_manager.models.expense  # noqa: F401
    import expense_manager.models.approval  # noqa: F401
    import expense_manager.models.notification  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")


def seed_dev_users(db: Session) -> List[User]:
    """
    Create the development users that do not exist yet

    Safe to call on every startup; users are matched by email.

    Args:
        db: Database session

    Returns:
        List of users created by this call
    """
    created = []
    for entry in DEV_USERS:
        if db.query(User).filter(User.email == entry["email"]).first():
            continue

        user = User(
            full_name=entry["full_name"],
            email=entry["email"],
            role=entry["role"],
            hashed_password=get_password_hash(settings.DEV_USER_PASSWORD),
            is_active=True
        )
        db.add(user)
        created.append(user)

    if created:
        db.commit()
        logger.info(f"Seeded development users: {', '.join(u.email for u in created)}")
    return created


def main():
    create_tables()
    db = SessionLocal()
    try:
        seed_dev_users(db)
    finally:
        db.close()

    logger.info("Database setup completed")
    for entry in DEV_USERS:
        logger.info(f"  {entry['role'].value:<9} {entry['email']} / {settings.DEV_USER_PASSWORD}")


if __name__ == "__main__":
    main()
