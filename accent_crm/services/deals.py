import logging

from sqlalchemy.orm import Session

from accent_crm.models.brand import Brand
from accent_crm.models.deal import Deal
from accent_crm.schemas.deal import DealUpsertSchema

logger = logging.getLogger(__name__)


def get_deal_by_brand(db: Session, brand_id: int) -> Deal | None:
    return db.query(Deal).filter(Deal.brand_id == brand_id).first()


def create_or_update_deal(db: Session, brand_id: int, payload: DealUpsertSchema) -> Deal | None:
    """Un seul deal par marque : met à jour l'existant, sinon le crée."""
    if not db.query(Brand.id).filter(Brand.id == brand_id).first():
        return None
    deal = get_deal_by_brand(db, brand_id)
    changes = payload.model_dump(exclude_unset=True)
    if deal:
        for key, value in changes.items():
            setattr(deal, key, value)
    else:
        deal = Deal(brand_id=brand_id, **changes)
        db.add(deal)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("create_or_update_deal failed brand_id=%s", brand_id)
        raise
    db.refresh(deal)
    return deal


def delete_deal(db: Session, brand_id: int) -> bool:
    deal = get_deal_by_brand(db, brand_id)
    if not deal:
        return False
    db.delete(deal)
    db.commit()
    return True


def get_deals_by_brand_ids(db: Session, brand_ids) -> dict:
    ids = list(brand_ids)
    if not ids:
        return {}
    return {d.brand_id: d for d in db.query(Deal).filter(Deal.brand_id.in_(ids)).all()}
