# intern_tracker/reference_data.py
import logging

from sqlalchemy.orm import Session

from .models import Category, Department, Supervisor

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Frontend Development", "frontend"),
    ("Backend Development", "backend"),
    ("Full Stack Development", "fullstack"),
    ("UI/UX Design", "design"),
    ("Database", "database"),
    ("DevOps", "devops"),
    ("Mobile Development", "mobile"),
    ("Data Science", "datascience"),
    ("Machine Learning", "ml"),
    ("Cybersecurity", "security"),
    ("Quality Assurance", "qa"),
    ("Project Management", "pm"),
    ("Other", "other"),
]

DEFAULT_DEPARTMENTS = [
    "Frontend Development",
    "Backend Development",
    "Full Stack Development",
    "UI/UX Design",
    "Database",
    "DevOps",
    "Mobile Development",
    "Data Science",
    "Quality Assurance",
    "Project Management",
    "Cybersecurity",
    "Machine Learning",
    "Cloud Computing",
    "Software Testing",
]

DEFAULT_SUPERVISORS = [
    "Sarah Johnson",
    "Mike Davis",
    "Emily Chen",
    "John Smith",
    "Lisa Wang",
    "David Brown",
    "Anna Martinez",
    "Robert Wilson",
    "Maria Garcia",
    "James Thompson",
    "Jessica Lee",
    "Kevin Rodriguez",
    "Amanda Foster",
    "Chris Parker",
]


def seed_reference_data(db: Session) -> None:
    """Fill empty reference tables with the default lists. Safe to call repeatedly."""
    if db.query(Category).count() == 0:
        db.add_all([Category(name=name, value=value) for name, value in DEFAULT_CATEGORIES])
        logger.info("Seeded %d categories", len(DEFAULT_CATEGORIES))
    if db.query(Department).count() == 0:
        db.add_all([Department(name=name) for name in DEFAULT_DEPARTMENTS])
        logger.info("Seeded %d departments", len(DEFAULT_DEPARTMENTS))
    if db.query(Supervisor).count() == 0:
        db.add_all([Supervisor(name=name) for name in DEFAULT_SUPERVISORS])
        logger.info("Seeded %d supervisors", len(DEFAULT_SUPERVISORS))
    db.commit()
