"""
Script to initialize the database.
Creates the tables and seeds an owner plus a few sample workers.
Safe to run more than once: existing accounts are left untouched.
"""
from sqlalchemy.orm import Session
from stitchhub.core.database import engine, Base, SessionLocal
from stitchhub.core.security import get_password_hash
from stitchhub.models.user import User, UserRole
import stitchhub.models  # noqa: F401
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SEED_USERS = [
    {"email": "admin@stitchhub.com", "password": "Admin@123", "name": "Admin User", "role": UserRole.OWNER},
    {"email": "worker1@stitchhub.com", "password": "Worker@123", "name": "John Doe", "role": UserRole.WORKER},
    {"email": "worker2@stitchhub.com", "password": "Worker@123", "name": "Jane Smith", "role": UserRole.WORKER},
    {"email": "worker3@stitchhub.com", "password": "Worker@123", "name": "Mike Johnson", "role": UserRole.WORKER},
]


def seed_users(db: Session) -> int:
    """Create the seed accounts that do not exist yet. Returns how many were added."""
    created = 0
    for seed in SEED_USERS:
        if db.query(User).filter(User.email == seed["email"]).first():
            logger.info(f"User {seed['email']} already exists, skipping")
            continue

        db.add(User(
            email=seed["email"],
            name=seed["name"],
            hashed_password=get_password_hash(seed["password"]),
            role=seed["role"].value,
        ))
        created += 1

    db.commit()
    return created


def init_db():
    """Initialize database tables and seed users."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    db = SessionLocal()
    try:
        created = seed_users(db)
        logger.info(f"Seeded {created} user(s)")
    except Exception as e:
        logger.error(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
