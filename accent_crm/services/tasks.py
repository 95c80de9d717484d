import logging
from datetime import datetime

from sqlalchemy.orm import Session

from accent_crm.models.brand import Brand
from accent_crm.models.task import Task
from accent_crm.schemas.task import TaskCreateSchema, TaskUpdateSchema

logger = logging.getLogger(__name__)

OPEN_STATUSES = ("pending", "in_progress")


def get_task(db: Session, task_id: int) -> Task | None:
    return db.query(Task).filter(Task.id == task_id).first()


def create_task(db: Session, payload: TaskCreateSchema) -> Task | None:
    if not db.query(Brand.id).filter(Brand.id == payload.brand_id).first():
        return None
    task = Task(**payload.model_dump())
    if task.status == "completed":
        task.completed_at = datetime.utcnow()
    db.add(task)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("create_task failed brand_id=%s", payload.brand_id)
        raise
    db.refresh(task)
    return task


def update_task(db: Session, task_id: int, payload: TaskUpdateSchema) -> Task | None:
    task = get_task(db, task_id)
    if not task:
        return None
    changes = payload.model_dump(exclude_unset=True)
    for key, value in changes.items():
        setattr(task, key, value)
    if "status" in changes:
        task.completed_at = (task.completed_at or datetime.utcnow()) if task.status == "completed" else None
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("update_task failed id=%s", task_id)
        raise
    db.refresh(task)
    return task


def toggle_task(db: Session, task_id: int) -> Task | None:
    """Terminée -> à faire (completed_at effacé), sinon -> terminée (completed_at = maintenant)."""
    task = get_task(db, task_id)
    if not task:
        return None
    if task.status == "completed":
        task.status = "pending"
        task.completed_at = None
    else:
        task.status = "completed"
        task.completed_at = datetime.utcnow()
    db.commit()
    db.refresh(task)
    logger.info("Task toggled id=%s status=%s", task.id, task.status)
    return task


def delete_task(db: Session, task_id: int) -> Task | None:
    task = get_task(db, task_id)
    if not task:
        return None
    db.delete(task)
    db.commit()
    return task


def _with_brand_names(rows):
    result = []
    for task, brand_name in rows:
        task.brand_name = brand_name
        result.append(task)
    return result


def _query_with_brand(db: Session):
    return db.query(Task, Brand.name).outerjoin(Brand, Brand.id == Task.brand_id)


def get_upcoming_tasks(db: Session, limit: int = 10):
    rows = (
        _query_with_brand(db)
        .filter(Task.status.in_(OPEN_STATUSES))
        .order_by(Task.due_date.is_(None), Task.due_date.asc())
        .limit(limit)
        .all()
    )
    return _with_brand_names(rows)


def get_overdue_tasks(db: Session, now: datetime | None = None):
    now = now or datetime.utcnow()
    rows = (
        _query_with_brand(db)
        .filter(Task.status.in_(OPEN_STATUSES))
        .filter(Task.due_date.isnot(None), Task.due_date < now)
        .order_by(Task.due_date.asc())
        .all()
    )
    return _with_brand_names(rows)


def list_tasks(db: Session, limit: int = 500):
    rows = (
        _query_with_brand(db)
        .order_by(Task.due_date.is_(None), Task.due_date.asc())
        .limit(limit)
        .all()
    )
    return _with_brand_names(rows)


def is_overdue(task, now: datetime | None = None) -> bool:
    now = now or datetime.utcnow()
    return bool(task.due_date) and task.due_date < now and task.status != "completed"


TASK_VIEWS = ("all", "pending", "overdue", "completed")


def filter_tasks(tasks, view: str, now: datetime | None = None) -> list:
    """Onglets de la page tâches : all / pending / overdue / completed."""
    if view == "pending":
        return [t for t in tasks if t.status in OPEN_STATUSES]
    if view == "overdue":
        return [t for t in tasks if is_overdue(t, now)]
    if view == "completed":
        return [t for t in tasks if t.status == "completed"]
    return list(tasks)
