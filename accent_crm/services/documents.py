import logging

from sqlalchemy.orm import Session

from accent_crm.models.brand import Brand
from accent_crm.models.document import Document
from accent_crm.schemas.document import DocumentCreateSchema, DocumentUpdateSchema

logger = logging.getLogger(__name__)


# Récupérer un document par id
def get_document(db: Session, document_id: int) -> Document | None:
    return db.query(Document).filter(Document.id == document_id).first()


# Ajouter un document (lien externe)
def create_document(db: Session, payload: DocumentCreateSchema) -> Document | None:
    if not db.query(Brand.id).filter(Brand.id == payload.brand_id).first():
        return None
    document = Document(**payload.model_dump())
    db.add(document)
    db.commit()
    db.refresh(document)  # recharge l'objet pour éviter l'erreur de sérialisation
    return document


def update_document(db: Session, document_id: int, payload: DocumentUpdateSchema) -> Document | None:
    document = get_document(db, document_id)
    if not document:
        return None
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(document, key, value)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("update_document failed id=%s", document_id)
        raise
    db.refresh(document)
    return document


def delete_document(db: Session, document_id: int) -> Document | None:
    document = get_document(db, document_id)
    if not document:
        return None
    db.delete(document)
    db.commit()
    return document
