# eduflow/db/init_db.py
import logging
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eduflow.core.config import settings
from eduflow.core.security_password import hash_password
from eduflow.models.course import Course
from eduflow.models.user import User, UserRole

logger = logging.getLogger(__name__)

STARTER_COURSES = [
    {
        "title": "Web Development Fundamentals",
        "description": "HTML, CSS and JavaScript from the ground up.",
        "instructor_name": "Rami Haddad",
        "category": "development",
        "level": "Beginner",
        "duration_hours": 12,
    },
    {
        "title": "Data Analysis with Python",
        "description": "Clean, explore and visualise data with pandas.",
        "instructor_name": "Maya Khoury",
        "category": "data",
        "level": "Intermediate",
        "duration_hours": 16,
    },
    {
        "title": "Digital Marketing Essentials",
        "description": "Campaigns, analytics and content strategy.",
        "instructor_name": "Nadim Saab",
        "category": "business",
        "level": "All Levels",
        "duration_hours": 8,
    },
]

def init_db(db: Session) -> None:
    """Seeds an admin account and a starter catalog; safe to run on every boot."""
    email = settings.SEED_ADMIN_EMAIL.strip().lower()
    admin = db.scalar(select(User).where(User.email == email))
    if not admin:
        db.add(User(
            name="EduFlow Admin",
            email=email,
            hashed_password=hash_password(settings.SEED_ADMIN_PASSWORD),
            role=UserRole.admin.value,
            is_verified=True,
        ))
        logger.info("seeded admin %s", email)

    if not db.scalar(select(func.count()).select_from(Course)):
        for data in STARTER_COURSES:
            db.add(Course(**data, modules=[], published=True))
        logger.info("seeded %d starter courses", len(STARTER_COURSES))

    db.commit()
