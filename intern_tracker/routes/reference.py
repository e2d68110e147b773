# intern_tracker/routes/reference.py
"""Lookup lists used by the dashboard forms. Intentionally unauthenticated."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import Conflict
from ..models import Category, Department, Supervisor
from ..schemas import CategoryCreate, NamedItemCreate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reference"])


def _exists(db: Session, column, value) -> bool:
    return db.query(column).filter(column == value).first() is not None


def _save(db: Session, item, label: str):
    try:
        db.add(item)
        db.commit()
        db.refresh(item)
    except IntegrityError:
        db.rollback()
        raise Conflict(f"{label.capitalize()} already exists")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create %s", label)
        return JSONResponse({"error": f"Failed to create {label}"}, status_code=500)
    logger.info("Created %s %s", label, item.id)
    return None


@router.get("/categories")
def list_categories(db: Session = Depends(get_db)):
    categories = db.query(Category).order_by(Category.id).all()
    return {
        "categories": [{"id": str(c.id), "name": c.name, "value": c.value} for c in categories],
        "success": True,
    }


@router.post("/categories", status_code=201)
def create_category(data: CategoryCreate, db: Session = Depends(get_db)):
    if _exists(db, Category.value, data.value):
        raise Conflict("Category already exists")
    category = Category(name=data.name, value=data.value)
    error = _save(db, category, "category")
    if error:
        return error
    return {"id": str(category.id), "name": category.name, "value": category.value}


@router.get("/departments")
def list_departments(db: Session = Depends(get_db)):
    departments = db.query(Department).order_by(Department.id).all()
    return {"departments": [d.name for d in departments], "success": True}


@router.post("/departments", status_code=201)
def create_department(data: NamedItemCreate, db: Session = Depends(get_db)):
    if _exists(db, Department.name, data.name):
        raise Conflict("Department already exists")
    department = Department(name=data.name)
    error = _save(db, department, "department")
    if error:
        return error
    return {"id": str(department.id), "name": department.name}


@router.get("/supervisors")
def list_supervisors(db: Session = Depends(get_db)):
    supervisors = db.query(Supervisor).order_by(Supervisor.id).all()
    return {"supervisors": [s.name for s in supervisors], "success": True}


@router.post("/supervisors", status_code=201)
def create_supervisor(data: NamedItemCreate, db: Session = Depends(get_db)):
    if _exists(db, Supervisor.name, data.name):
        raise Conflict("Supervisor already exists")
    supervisor = Supervisor(name=data.name)
    error = _save(db, supervisor, "supervisor")
    if error:
        return error
    return {"id": str(supervisor.id), "name": supervisor.name}
