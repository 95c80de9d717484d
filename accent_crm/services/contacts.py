import logging

from sqlalchemy.orm import Session

from accent_crm.models.brand import Brand
from accent_crm.models.contact import Contact
from accent_crm.schemas.contact import ContactCreateSchema, ContactUpdateSchema

logger = logging.getLogger(__name__)


def get_contacts_by_brand(db: Session, brand_id: int):
    return db.query(Contact).filter(Contact.brand_id == brand_id).order_by(Contact.id).all()


def get_contact(db: Session, contact_id: int) -> Contact | None:
    return db.query(Contact).filter(Contact.id == contact_id).first()


def _clear_other_primaries(db: Session, brand_id: int, keep_id: int | None = None):
    q = db.query(Contact).filter(Contact.brand_id == brand_id, Contact.is_primary.is_(True))
    if keep_id is not None:
        q = q.filter(Contact.id != keep_id)
    for other in q.all():
        other.is_primary = False


# ---------------- CREATE ----------------
def create_contact(db: Session, payload: ContactCreateSchema) -> Contact | None:
    if not db.query(Brand.id).filter(Brand.id == payload.brand_id).first():
        return None
    contact = Contact(**payload.model_dump())
    if contact.is_primary:
        _clear_other_primaries(db, payload.brand_id)
    db.add(contact)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("create_contact failed brand_id=%s", payload.brand_id)
        raise
    db.refresh(contact)
    return contact


# ---------------- UPDATE ----------------
def update_contact(db: Session, contact_id: int, payload: ContactUpdateSchema) -> Contact | None:
    contact = get_contact(db, contact_id)
    if not contact:
        return None
    changes = payload.model_dump(exclude_unset=True)
    for key, value in changes.items():
        setattr(contact, key, value)
    if changes.get("is_primary"):
        _clear_other_primaries(db, contact.brand_id, keep_id=contact.id)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("update_contact failed id=%s", contact_id)
        raise
    db.refresh(contact)
    return contact


# ---------------- DELETE ----------------
def delete_contact(db: Session, contact_id: int) -> Contact | None:
    contact = get_contact(db, contact_id)
    if not contact:
        return None
    db.delete(contact)
    db.commit()
    return contact
