import logging
from datetime import datetime
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.responses import RedirectResponse

from accent_crm.database import get_db
from accent_crm.api.templating import templates
from accent_crm.schemas.choices import (
    BRAND_STATUSES,
    COMMUNICATION_TYPES,
    DEAL_STAGES,
    DESIGN_CATEGORIES,
    DOCUMENT_TYPES,
    PROJECT_SECTORS,
    TASK_PRIORITIES,
)
from accent_crm.schemas.brand import BrandCreateSchema, BrandUpdateSchema
from accent_crm.schemas.contact import ContactCreateSchema, ContactUpdateSchema
from accent_crm.schemas.deal import DealUpsertSchema
from accent_crm.schemas.communication import CommunicationCreateSchema
from accent_crm.schemas.document import DocumentCreateSchema
from accent_crm.schemas.task import TaskCreateSchema
from accent_crm.services import analytics as analytics_service
from accent_crm.services.brands import (
    BRAND_FILTER_KEYS,
    apply_filters,
    count_active_filters,
    create_brand,
    delete_brand,
    filter_options,
    get_brand_with_relations,
    get_brands,
    get_dashboard_stats,
    update_brand,
)
from accent_crm.services.charts import build_analytics_charts
from accent_crm.services.communications import (
    create_communication,
    delete_communication,
    get_communication,
    get_recent_communications,
)
from accent_crm.services.contacts import create_contact, delete_contact, get_contact, get_contacts_by_brand, update_contact
from accent_crm.services.deals import create_or_update_deal, get_deals_by_brand_ids
from accent_crm.services.documents import create_document, delete_document, get_document
from accent_crm.services.tasks import (
    TASK_VIEWS,
    create_task,
    delete_task,
    filter_tasks,
    get_task,
    get_upcoming_tasks,
    is_overdue,
    list_tasks,
    toggle_task,
)


router = APIRouter(tags=["Pages"])

logger = logging.getLogger("uvicorn.error")

BRAND_TABS = ("overview", "communications", "documents", "tasks")


# ---------------- Helpers formulaires ----------------
def _as_str(value) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _as_float(value: str | None, default: float | None = None) -> float | None:
    value = _as_str(value)
    if value is None:
        return default
    try:
        return float(value.replace(",", "."))
    except ValueError as exc:
        raise ValueError(f"'{value}' is not a number") from exc


def _as_flag(value: str | None) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "on", "yes"}


def _as_datetime(value: str | None) -> datetime | None:
    value = _as_str(value)
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"'{value}' is not a valid date") from exc


def _error_message(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
            parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
        return "; ".join(parts)
    return str(exc)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


def _redirect_error(url: str, message: str) -> RedirectResponse:
    sep = "&" if "?" in url else "?"
    return _redirect(f"{url}{sep}{urlencode({'error': message})}")


def _brand_redirect(brand_id: int, tab: str = "overview") -> RedirectResponse:
    return _redirect(f"/brands/{brand_id}?tab={tab}")


def _not_found(request: Request, what: str = "Brand") -> HTMLResponse:
    return templates.TemplateResponse(request, "not_found.html", {"what": what}, status_code=404)


def _form_choices() -> dict:
    return {
        "statuses": BRAND_STATUSES,
        "deal_stages": DEAL_STAGES,
        "all_sectors": PROJECT_SECTORS,
        "all_categories": DESIGN_CATEGORIES,
    }


def _brand_fields_from_form(form) -> dict:
    return {
        "name": form.get("name") or "",
        "type": form.get("type"),
        "website": form.get("website"),
        "country": form.get("country"),
        "country_of_origin": form.get("country_of_origin"),
        "project_sectors": form.getlist("project_sectors"),
        "design_categories": form.getlist("design_categories"),
        "status": form.get("status") or "prospect",
        "deal_stage": form.get("deal_stage") or "lead",
        "priority": form.get("priority"),
        "comments": form.get("comments"),
    }


def _deal_from_form(form) -> DealUpsertSchema:
    """La remise est saisie en pourcentage et stockée en fraction."""
    discount = _as_float(form.get("discount"))
    return DealUpsertSchema(
        discount=discount / 100 if discount is not None else None,
        payment_terms=_as_str(form.get("payment_terms")),
        shipping_terms=_as_str(form.get("shipping_terms")),
        dealer_access=_as_str(form.get("dealer_access")),
        freight_free_limit=_as_float(form.get("freight_free_limit")),
    )


# ---------------- Tableau de bord ----------------
@router.get("/", response_class=HTMLResponse)
def dashboard_home(request: Request, db: Session = Depends(get_db)):
    error = None
    stats, recent_comms, upcoming_tasks = None, [], []
    try:
        stats = get_dashboard_stats(db)
        recent_comms = get_recent_communications(db, limit=5)
        upcoming_tasks = get_upcoming_tasks(db, limit=5)
    except Exception:
        logger.exception("Error loading dashboard")
        error = "Error loading dashboard"
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"stats": stats, "recent_comms": recent_comms, "upcoming_tasks": upcoming_tasks, "error": error},
    )


# ---------------- Marques : liste ----------------
@router.get("/brands", response_class=HTMLResponse)
def brands_list(request: Request, db: Session = Depends(get_db)):
    filters = {key: request.query_params.get(key, "") for key in BRAND_FILTER_KEYS}
    brands = get_brands(db)
    deals = {}
    if filters.get("has_discount") or filters.get("has_dealer_access"):
        deals = get_deals_by_brand_ids(db, [b.id for b in brands])
    filtered = apply_filters(brands, filters, deals)
    return templates.TemplateResponse(
        request,
        "brands/list.html",
        {
            "brands": filtered,
            "total": len(brands),
            "filters": filters,
            "active_filters": count_active_filters(filters),
            "options": filter_options(brands),
            **_form_choices(),
        },
    )


# ---------------- Marques : création ----------------
@router.get("/brands/new", response_class=HTMLResponse)
def brand_new_form(request: Request):
    return templates.TemplateResponse(
        request, "brands/form.html", {"mode": "new", "form": {}, "error": None, **_form_choices()}
    )


@router.post("/brands/new", response_class=HTMLResponse)
async def brand_create(request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    values = dict(form)
    values["project_sectors"] = form.getlist("project_sectors")
    values["design_categories"] = form.getlist("design_categories")

    def _fail(message: str):
        return templates.TemplateResponse(
            request,
            "brands/form.html",
            {"mode": "new", "form": values, "error": message, **_form_choices()},
            status_code=400,
        )

    if not _as_str(form.get("name")):
        return _fail("Brand name is required")
    if not _as_str(form.get("contact_name")) or not _as_str(form.get("contact_email")):
        return _fail("Contact name and email are required")
    if not all(_as_str(form.get(k)) for k in ("discount", "payment_terms", "shipping_terms")):
        return _fail("Discount, payment terms, and shipping terms are required")

    try:
        brand_payload = BrandCreateSchema(**_brand_fields_from_form(form))
        deal_payload = _deal_from_form(form)
    except (ValidationError, ValueError) as exc:
        return _fail(_error_message(exc))

    try:
        brand = create_brand(db, brand_payload)
        create_contact(db, ContactCreateSchema(
            brand_id=brand.id,
            name=_as_str(form.get("contact_name")),
            email=_as_str(form.get("contact_email")),
            phone=form.get("contact_phone"),
            role=form.get("contact_role"),
            is_primary=True,
        ))
        create_or_update_deal(db, brand.id, deal_payload)
    except Exception:
        logger.exception("Error creating brand")
        return _fail("Failed to create brand. Please try again.")
    return _brand_redirect(brand.id)


# ---------------- Marques : détail ----------------
@router.get("/brands/{brand_id}", response_class=HTMLResponse)
def brand_detail(brand_id: int, request: Request, tab: str = "overview", db: Session = Depends(get_db)):
    brand = get_brand_with_relations(db, brand_id)
    if not brand:
        return _not_found(request)
    if tab not in BRAND_TABS:
        tab = "overview"
    tasks = brand["tasks"]
    primary = next((c for c in brand["contacts"] if c.is_primary), None)
    return templates.TemplateResponse(
        request,
        "brands/detail.html",
        {
            "brand": brand,
            "tab": tab,
            "tabs": BRAND_TABS,
            "primary_contact": primary,
            "open_tasks": [t for t in tasks if t.status != "completed"],
            "completed_tasks": [t for t in tasks if t.status == "completed"],
            "communication_types": COMMUNICATION_TYPES,
            "document_types": DOCUMENT_TYPES,
            "task_priorities": TASK_PRIORITIES,
            "error": request.query_params.get("error"),
        },
    )


@router.post("/brands/{brand_id}/delete")
def brand_delete(brand_id: int, request: Request, db: Session = Depends(get_db)):
    try:
        deleted = delete_brand(db, brand_id)
    except Exception:
        logger.exception("Failed to delete brand id=%s", brand_id)
        return _redirect_error(f"/brands/{brand_id}", "Failed to delete brand")
    if not deleted:
        return _not_found(request)
    return _redirect("/brands")


# ---------------- Marques : édition ----------------
def _edit_form_values(brand: dict) -> dict:
    values = {k: brand.get(k) for k in ("name", "type", "website", "country", "country_of_origin", "status", "deal_stage", "priority", "comments")}
    values["project_sectors"] = brand.get("project_sectors") or []
    values["design_categories"] = brand.get("design_categories") or []
    deal = brand.get("deal")
    if deal:
        values["discount"] = round(deal.discount * 100, 2) if deal.discount is not None else None
        values["payment_terms"] = deal.payment_terms
        values["shipping_terms"] = deal.shipping_terms
        values["dealer_access"] = deal.dealer_access
        values["freight_free_limit"] = deal.freight_free_limit
    return values


@router.get("/brands/{brand_id}/edit", response_class=HTMLResponse)
def brand_edit_form(brand_id: int, request: Request, db: Session = Depends(get_db)):
    brand = get_brand_with_relations(db, brand_id)
    if not brand:
        return _not_found(request)
    return templates.TemplateResponse(
        request,
        "brands/form.html",
        {
            "mode": "edit",
            "brand": brand,
            "form": _edit_form_values(brand),
            "error": request.query_params.get("error"),
            **_form_choices(),
        },
    )


@router.post("/brands/{brand_id}/edit", response_class=HTMLResponse)
async def brand_update(brand_id: int, request: Request, db: Session = Depends(get_db)):
    brand = get_brand_with_relations(db, brand_id)
    if not brand:
        return _not_found(request)
    form = await request.form()
    values = dict(form)
    values["project_sectors"] = form.getlist("project_sectors")
    values["design_categories"] = form.getlist("design_categories")

    def _fail(message: str):
        return templates.TemplateResponse(
            request,
            "brands/form.html",
            {"mode": "edit", "brand": brand, "form": values, "error": message, **_form_choices()},
            status_code=400,
        )

    if not _as_str(form.get("name")):
        return _fail("Brand name is required")
    try:
        brand_payload = BrandUpdateSchema(**_brand_fields_from_form(form))
        deal_payload = None
        if any(_as_str(form.get(k)) for k in ("discount", "payment_terms", "shipping_terms")):
            deal_payload = _deal_from_form(form)
    except (ValidationError, ValueError) as exc:
        return _fail(_error_message(exc))

    try:
        update_brand(db, brand_id, brand_payload)
        if deal_payload is not None:
            create_or_update_deal(db, brand_id, deal_payload)
    except Exception:
        logger.exception("Error updating brand id=%s", brand_id)
        return _fail("Failed to update brand")
    return _brand_redirect(brand_id)


# ---------------- Contacts ----------------
def _owned(child, brand_id: int):
    """La ligne n'est modifiable que depuis l'URL de sa propre marque."""
    return child if child is not None and child.brand_id == brand_id else None


@router.post("/brands/{brand_id}/contacts")
async def brand_add_contact(brand_id: int, request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    back = f"/brands/{brand_id}/edit" if form.get("next") == "edit" else f"/brands/{brand_id}?tab=overview"
    if not _as_str(form.get("name")) or not _as_str(form.get("email")):
        return _redirect_error(back, "Name and email are required")
    try:
        # le premier contact d'une marque devient principal
        is_primary = _as_flag(form.get("is_primary")) or not get_contacts_by_brand(db, brand_id)
        contact = create_contact(db, ContactCreateSchema(
            brand_id=brand_id,
            name=_as_str(form.get("name")),
            email=_as_str(form.get("email")),
            phone=form.get("phone"),
            role=form.get("role"),
            is_primary=is_primary,
        ))
    except Exception:
        logger.exception("Failed to add contact brand_id=%s", brand_id)
        return _redirect_error(back, "Failed to add contact")
    if not contact:
        return _not_found(request)
    return _redirect(back)


@router.post("/brands/{brand_id}/contacts/{contact_id}/primary")
def brand_set_primary_contact(brand_id: int, contact_id: int, request: Request, db: Session = Depends(get_db)):
    if not _owned(get_contact(db, contact_id), brand_id):
        return _not_found(request, "Contact")
    update_contact(db, contact_id, ContactUpdateSchema(is_primary=True))
    return _brand_redirect(brand_id)


@router.post("/brands/{brand_id}/contacts/{contact_id}/delete")
def brand_delete_contact(brand_id: int, contact_id: int, request: Request, db: Session = Depends(get_db)):
    if not _owned(get_contact(db, contact_id), brand_id):
        return _not_found(request, "Contact")
    delete_contact(db, contact_id)
    return _brand_redirect(brand_id)


# ---------------- Communications ----------------
@router.post("/brands/{brand_id}/communications")
async def brand_add_communication(brand_id: int, request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    back = f"/brands/{brand_id}?tab=communications"
    try:
        payload = CommunicationCreateSchema(
            brand_id=brand_id,
            type=form.get("type") or "email",
            date=_as_datetime(form.get("date")),
            subject=form.get("subject"),
            summary=form.get("summary"),
            participants=form.get("participants"),
            follow_up_required=_as_flag(form.get("follow_up_required")),
            next_action=form.get("next_action"),
        )
    except (ValidationError, ValueError) as exc:
        return _redirect_error(back, _error_message(exc))
    try:
        comm = create_communication(db, payload)
    except Exception:
        logger.exception("Failed to add communication brand_id=%s", brand_id)
        return _redirect_error(back, "Failed to add communication")
    if not comm:
        return _not_found(request)
    return _brand_redirect(brand_id, "communications")


@router.post("/brands/{brand_id}/communications/{communication_id}/delete")
def brand_delete_communication(brand_id: int, communication_id: int, request: Request, db: Session = Depends(get_db)):
    if not _owned(get_communication(db, communication_id), brand_id):
        return _not_found(request, "Communication")
    delete_communication(db, communication_id)
    return _brand_redirect(brand_id, "communications")


# ---------------- Documents ----------------
@router.post("/brands/{brand_id}/documents")
async def brand_add_document(brand_id: int, request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    back = f"/brands/{brand_id}?tab=documents"
    try:
        payload = DocumentCreateSchema(
            brand_id=brand_id,
            document_type=form.get("document_type") or "other",
            name=_as_str(form.get("name")) or "",
            url=_as_str(form.get("url")) or "",
            version=_as_str(form.get("version")),
        )
    except ValidationError as exc:
        return _redirect_error(back, _error_message(exc))
    try:
        document = create_document(db, payload)
    except Exception:
        logger.exception("Failed to add document brand_id=%s", brand_id)
        return _redirect_error(back, "Failed to add document")
    if not document:
        return _not_found(request)
    return _brand_redirect(brand_id, "documents")


@router.post("/brands/{brand_id}/documents/{document_id}/delete")
def brand_delete_document(brand_id: int, document_id: int, request: Request, db: Session = Depends(get_db)):
    if not _owned(get_document(db, document_id), brand_id):
        return _not_found(request, "Document")
    delete_document(db, document_id)
    return _brand_redirect(brand_id, "documents")


# ---------------- Tâches ----------------
@router.post("/brands/{brand_id}/tasks")
async def brand_add_task(brand_id: int, request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    back = f"/brands/{brand_id}?tab=tasks"
    try:
        payload = TaskCreateSchema(
            brand_id=brand_id,
            title=_as_str(form.get("title")) or "",
            description=form.get("description"),
            due_date=_as_datetime(form.get("due_date")),
            assigned_to=form.get("assigned_to"),
            priority=form.get("priority") or "medium",
        )
    except (ValidationError, ValueError) as exc:
        return _redirect_error(back, _error_message(exc))
    try:
        task = create_task(db, payload)
    except Exception:
        logger.exception("Failed to add task brand_id=%s", brand_id)
        return _redirect_error(back, "Failed to add task")
    if not task:
        return _not_found(request)
    return _brand_redirect(brand_id, "tasks")


@router.post("/brands/{brand_id}/tasks/{task_id}/delete")
def brand_delete_task(brand_id: int, task_id: int, request: Request, db: Session = Depends(get_db)):
    if not _owned(get_task(db, task_id), brand_id):
        return _not_found(request, "Task")
    delete_task(db, task_id)
    return _brand_redirect(brand_id, "tasks")


@router.post("/tasks/{task_id}/toggle")
async def task_toggle(task_id: int, request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    task = toggle_task(db, task_id)
    if not task:
        return _not_found(request, "Task")
    target = form.get("next") or ""
    # uniquement des chemins internes
    if not target.startswith("/") or target.startswith("//"):
        target = f"/brands/{task.brand_id}?tab=tasks"
    return _redirect(target)


@router.get("/tasks", response_class=HTMLResponse)
def tasks_page(request: Request, view: str = Query("all", alias="filter"), db: Session = Depends(get_db)):
    view = view if view in TASK_VIEWS else "all"
    now = datetime.utcnow()
    tasks = list_tasks(db)
    shown = filter_tasks(tasks, view, now)
    return templates.TemplateResponse(
        request,
        "tasks.html",
        {
            "tasks": shown,
            "view": view,
            "views": TASK_VIEWS,
            "overdue_ids": {t.id for t in shown if is_overdue(t, now)},
        },
    )


# ---------------- Journal des communications ----------------
@router.get("/communications", response_class=HTMLResponse)
def communications_page(request: Request, db: Session = Depends(get_db)):
    error = None
    communications = []
    try:
        communications = get_recent_communications(db, limit=100)
    except Exception:
        logger.exception("Error loading communications")
        error = "Error loading communications"
    return templates.TemplateResponse(
        request, "communications.html", {"communications": communications, "error": error}
    )


# ---------------- Analytics ----------------
@router.get("/analytics", response_class=HTMLResponse)
def analytics_page(request: Request, db: Session = Depends(get_db)):
    brands = get_brands(db)
    data = analytics_service.build_analytics(brands)
    return templates.TemplateResponse(
        request,
        "analytics.html",
        {"analytics": data, "charts": build_analytics_charts(data)},
    )
