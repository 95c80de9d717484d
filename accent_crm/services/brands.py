import logging

from sqlalchemy.orm import Session

from accent_crm.models.brand import Brand
from accent_crm.models.contact import Contact
from accent_crm.models.deal import Deal
from accent_crm.models.communication import Communication
from accent_crm.models.document import Document
from accent_crm.models.task import Task
from accent_crm.schemas.brand import BrandCreateSchema, BrandUpdateSchema
from accent_crm.services.analytics import compute_dashboard_stats

logger = logging.getLogger(__name__)


def brand_to_dict(brand: Brand) -> dict:
    return {col.name: getattr(brand, col.name) for col in Brand.__table__.columns}


# Récupérer les marques visibles (hide = False), triées par nom
def get_brands(
    db: Session,
    *,
    status: str | None = None,
    deal_stage: str | None = None,
    priority: int | None = None,
    sales_owner: str | None = None,
    search: str | None = None,
):
    q = db.query(Brand).filter(Brand.hide.is_(False))
    if status:
        q = q.filter(Brand.status == status)
    if deal_stage:
        q = q.filter(Brand.deal_stage == deal_stage)
    if priority:
        q = q.filter(Brand.priority == priority)
    if sales_owner:
        q = q.filter(Brand.sales_owner == sales_owner)
    if search:
        q = q.filter(Brand.name.ilike(f"%{search}%"))
    return q.order_by(Brand.name.asc()).all()


# Récupérer une marque par id
def get_brand(db: Session, brand_id: int) -> Brand | None:
    return db.query(Brand).filter(Brand.id == brand_id).first()


def get_brand_with_relations(db: Session, brand_id: int) -> dict | None:
    """
    Retourne la marque et ses lignes rattachées, chacune relue dans sa table :
    - contacts
    - deal (ou None)
    - communications (plus récentes d'abord)
    - documents (plus récents d'abord)
    - tâches (échéance croissante)
    """
    brand = get_brand(db, brand_id)
    if not brand:
        return None
    data = brand_to_dict(brand)
    data["contacts"] = db.query(Contact).filter(Contact.brand_id == brand_id).order_by(Contact.id).all()
    data["deal"] = db.query(Deal).filter(Deal.brand_id == brand_id).first()
    data["communications"] = (
        db.query(Communication)
        .filter(Communication.brand_id == brand_id)
        .order_by(Communication.date.desc())
        .all()
    )
    data["documents"] = (
        db.query(Document)
        .filter(Document.brand_id == brand_id)
        .order_by(Document.upload_date.desc())
        .all()
    )
    # échéances nulles en dernier
    data["tasks"] = (
        db.query(Task)
        .filter(Task.brand_id == brand_id)
        .order_by(Task.due_date.is_(None), Task.due_date.asc())
        .all()
    )
    return data


# Créer une marque
def create_brand(db: Session, payload: BrandCreateSchema) -> Brand:
    brand = Brand(**payload.model_dump())
    db.add(brand)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("create_brand failed name=%s", payload.name)
        raise
    db.refresh(brand)
    logger.info("Brand created id=%s name=%s", brand.id, brand.name)
    return brand


# Mettre à jour une marque
def update_brand(db: Session, brand_id: int, payload: BrandUpdateSchema) -> Brand | None:
    brand = get_brand(db, brand_id)
    if not brand:
        return None
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(brand, key, value)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("update_brand failed id=%s", brand_id)
        raise
    db.refresh(brand)
    return brand


# Supprimer une marque (pas de suppression en cascade côté application)
def delete_brand(db: Session, brand_id: int) -> bool:
    brand = get_brand(db, brand_id)
    if not brand:
        return False
    db.delete(brand)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("delete_brand failed id=%s", brand_id)
        raise
    logger.info("Brand deleted id=%s", brand_id)
    return True


def get_dashboard_stats(db: Session) -> dict:
    brands = db.query(Brand).all()
    tasks = db.query(Task).all()
    return compute_dashboard_stats(brands, tasks)


# ---------------- Filtres de la liste des marques ----------------
BRAND_FILTER_KEYS = (
    "search",
    "status",
    "deal_stage",
    "priority",
    "project_sector",
    "design_category",
    "country_of_origin",
    "has_discount",
    "has_dealer_access",
)


def _contains(value: str | None, needle: str) -> bool:
    return bool(value) and needle in value.lower()


def apply_filters(brands, filters: dict, deals_by_brand: dict | None = None) -> list:
    """Filtre en mémoire la liste déjà chargée, comme la page liste le fait."""
    deals_by_brand = deals_by_brand or {}
    result = list(brands)

    search = (filters.get("search") or "").strip().lower()
    if search:
        result = [
            b for b in result
            if _contains(b.name, search) or _contains(b.type, search) or _contains(b.country, search)
        ]
    if filters.get("status"):
        result = [b for b in result if b.status == filters["status"]]
    if filters.get("deal_stage"):
        result = [b for b in result if b.deal_stage == filters["deal_stage"]]
    if filters.get("priority"):
        try:
            wanted = int(filters["priority"])
        except (TypeError, ValueError):
            wanted = None
        result = [b for b in result if b.priority == wanted]
    if filters.get("project_sector"):
        result = [b for b in result if filters["project_sector"] in (b.project_sectors or [])]
    if filters.get("design_category"):
        result = [b for b in result if filters["design_category"] in (b.design_categories or [])]
    country = (filters.get("country_of_origin") or "").strip().lower()
    if country:
        result = [b for b in result if _contains(b.country_of_origin, country)]
    if filters.get("has_discount") == "yes":
        result = [
            b for b in result
            if deals_by_brand.get(b.id) is not None and (deals_by_brand[b.id].discount or 0) > 0
        ]
    if filters.get("has_dealer_access") == "yes":
        result = [
            b for b in result
            if deals_by_brand.get(b.id) is not None and deals_by_brand[b.id].dealer_access
        ]
    return result


def count_active_filters(filters: dict) -> int:
    return sum(1 for key in BRAND_FILTER_KEYS if filters.get(key) not in (None, ""))


def filter_options(brands) -> dict:
    """Valeurs distinctes triées pour les listes déroulantes."""
    countries = sorted({b.country_of_origin for b in brands if b.country_of_origin})
    sectors = sorted({s for b in brands for s in (b.project_sectors or [])})
    categories = sorted({c for b in brands for c in (b.design_categories or [])})
    return {"countries": countries, "sectors": sectors, "categories": categories}
