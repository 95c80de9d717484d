import logging
from datetime import datetime

from sqlalchemy.orm import Session

from accent_crm.models.brand import Brand
from accent_crm.models.communication import Communication
from accent_crm.schemas.communication import CommunicationCreateSchema, CommunicationUpdateSchema

logger = logging.getLogger(__name__)


def get_communication(db: Session, communication_id: int) -> Communication | None:
    return db.query(Communication).filter(Communication.id == communication_id).first()


def create_communication(db: Session, payload: CommunicationCreateSchema) -> Communication | None:
    brand = db.query(Brand).filter(Brand.id == payload.brand_id).first()
    if not brand:
        return None
    data = payload.model_dump()
    data["date"] = data.get("date") or datetime.utcnow()
    comm = Communication(**data)
    db.add(comm)
    # la marque garde la date du dernier échange
    brand.last_contact_date = comm.date
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("create_communication failed brand_id=%s", payload.brand_id)
        raise
    db.refresh(comm)
    return comm


def update_communication(db: Session, communication_id: int, payload: CommunicationUpdateSchema) -> Communication | None:
    comm = get_communication(db, communication_id)
    if not comm:
        return None
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(comm, key, value)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("update_communication failed id=%s", communication_id)
        raise
    db.refresh(comm)
    return comm


def delete_communication(db: Session, communication_id: int) -> Communication | None:
    comm = get_communication(db, communication_id)
    if not comm:
        return None
    db.delete(comm)
    db.commit()
    return comm


def get_recent_communications(db: Session, limit: int = 10):
    """Dernières communications (toutes marques), avec brand_name renseigné."""
    rows = (
        db.query(Communication, Brand.name)
        .outerjoin(Brand, Brand.id == Communication.brand_id)
        .order_by(Communication.date.desc())
        .limit(limit)
        .all()
    )
    result = []
    for comm, brand_name in rows:
        comm.brand_name = brand_name
        result.append(comm)
    return result
