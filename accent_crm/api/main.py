# ---------------- Imports principaux ----------------
from fastapi import FastAPI, Depends, HTTPException, Request, Form, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, RedirectResponse
import logging
import os
from sqlalchemy.orm import Session

from accent_crm.database import get_db, init_db
from accent_crm.api import pages
from accent_crm.api.templating import templates
from accent_crm.security.auth import (
    AUTH_COOKIE,
    AUTH_COOKIE_VALUE,
    check_login_password,
    cookie_max_age,
    is_authenticated,
    is_public_path,
)


# ---------------- Définition app FastAPI ----------------
app = FastAPI(title="Accent CRM", description="Sales & Partner Management")
app.include_router(pages.router)

logger = logging.getLogger("uvicorn.error")


@app.on_event("startup")
def _on_startup():
    if os.getenv("SKIP_DB_INIT") or os.getenv("PYTEST_CURRENT_TEST"):
        return
    init_db()
    logger.info("Database tables ready")


@app.get("/health")
def health():
    return {"status": "ok"}


# ---------------- Middleware auth cookie (route gate) ----------------
@app.middleware("http")
async def auth_cookie_middleware(request: Request, call_next):
    path = request.url.path
    authenticated = is_authenticated(request.cookies)
    if path == "/login" and authenticated:
        return RedirectResponse(url="/", status_code=303)
    if not is_public_path(path) and not authenticated:
        return RedirectResponse(url="/login", status_code=303)
    return await call_next(request)


# ---------------- Middleware CORS ----------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------- Auth simple (login/logout) ----------------
@app.get("/login", response_class=HTMLResponse)
def login_form(request: Request):
    return templates.TemplateResponse(request, "login.html", {})


@app.post("/login")
def login(request: Request, password: str = Form(...)):
    if not check_login_password(password):
        logger.info("Login refused from %s", request.client.host if request.client else "unknown")
        return templates.TemplateResponse(
            request, "login.html", {"error": "Invalid password"}, status_code=401
        )
    response = RedirectResponse(url="/", status_code=303)
    response.set_cookie(AUTH_COOKIE, AUTH_COOKIE_VALUE, httponly=True, max_age=cookie_max_age(), path="/")
    return response


@app.post("/logout")
def logout():
    resp = RedirectResponse("/login", status_code=303)
    resp.delete_cookie(AUTH_COOKIE, path="/")
    return resp


# ---------------- Imports Services ----------------
from accent_crm.services.brands import (
    get_brands,
    get_brand,
    get_brand_with_relations,
    create_brand,
    update_brand,
    delete_brand,
    get_dashboard_stats,
)
from accent_crm.services.contacts import get_contacts_by_brand, create_contact, update_contact, delete_contact
from accent_crm.services.deals import get_deal_by_brand, create_or_update_deal, delete_deal
from accent_crm.services.communications import (
    create_communication,
    update_communication,
    delete_communication,
    get_recent_communications,
)
from accent_crm.services.documents import create_document, update_document, delete_document
from accent_crm.services.tasks import (
    create_task,
    update_task,
    delete_task,
    toggle_task,
    get_upcoming_tasks,
    get_overdue_tasks,
)
from accent_crm.services.analytics import build_analytics

# ---------------- Imports Schémas ----------------
from accent_crm.schemas.brand import BrandSchema, BrandWithRelationsSchema, BrandCreateSchema, BrandUpdateSchema
from accent_crm.schemas.contact import ContactSchema, ContactCreateSchema, ContactUpdateSchema
from accent_crm.schemas.deal import DealSchema, DealUpsertSchema
from accent_crm.schemas.communication import (
    CommunicationSchema,
    CommunicationLogSchema,
    CommunicationCreateSchema,
    CommunicationUpdateSchema,
)
from accent_crm.schemas.document import DocumentSchema, DocumentCreateSchema, DocumentUpdateSchema
from accent_crm.schemas.task import TaskSchema, TaskWithBrandSchema, TaskCreateSchema, TaskUpdateSchema


# ---------------- Brands ----------------
@app.get("/api/brands/", response_model=list[BrandSchema])
def read_brands(
    db: Session = Depends(get_db),
    status: str | None = Query(None),
    deal_stage: str | None = Query(None),
    priority: int | None = Query(None),
    sales_owner: str | None = Query(None),
    search: str | None = Query(None),
):
    return get_brands(
        db,
        status=status,
        deal_stage=deal_stage,
        priority=priority,
        sales_owner=sales_owner,
        search=search,
    )


@app.get("/api/brands/{brand_id}", response_model=BrandWithRelationsSchema)
def read_brand(brand_id: int, db: Session = Depends(get_db)):
    brand = get_brand_with_relations(db, brand_id)
    if not brand:
        raise HTTPException(status_code=404, detail="Brand not found")
    return brand


@app.post("/api/brands/", response_model=BrandSchema)
def create_new_brand(payload: BrandCreateSchema, db: Session = Depends(get_db)):
    return create_brand(db, payload)


@app.put("/api/brands/{brand_id}", response_model=BrandSchema)
def update_existing_brand(brand_id: int, payload: BrandUpdateSchema, db: Session = Depends(get_db)):
    brand = update_brand(db, brand_id, payload)
    if not brand:
        raise HTTPException(status_code=404, detail="Brand not found")
    return brand


@app.delete("/api/brands/{brand_id}")
def delete_existing_brand(brand_id: int, db: Session = Depends(get_db)):
    if not delete_brand(db, brand_id):
        raise HTTPException(status_code=404, detail="Brand not found")
    return {"message": "Deleted"}


@app.get("/api/dashboard/stats")
def read_dashboard_stats(db: Session = Depends(get_db)):
    return get_dashboard_stats(db)


@app.get("/api/analytics")
def read_analytics(db: Session = Depends(get_db)):
    return build_analytics(get_brands(db))


# ---------------- Contacts ----------------
@app.get("/api/brands/{brand_id}/contacts", response_model=list[ContactSchema])
def read_brand_contacts(brand_id: int, db: Session = Depends(get_db)):
    if not get_brand(db, brand_id):
        raise HTTPException(status_code=404, detail="Brand not found")
    return get_contacts_by_brand(db, brand_id)


@app.post("/api/contacts/", response_model=ContactSchema)
def create_new_contact(payload: ContactCreateSchema, db: Session = Depends(get_db)):
    contact = create_contact(db, payload)
    if not contact:
        raise HTTPException(status_code=404, detail="Brand not found")
    return contact


@app.put("/api/contacts/{contact_id}", response_model=ContactSchema)
def update_existing_contact(contact_id: int, payload: ContactUpdateSchema, db: Session = Depends(get_db)):
    contact = update_contact(db, contact_id, payload)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


@app.delete("/api/contacts/{contact_id}")
def delete_existing_contact(contact_id: int, db: Session = Depends(get_db)):
    if not delete_contact(db, contact_id):
        raise HTTPException(status_code=404, detail="Contact not found")
    return {"message": "Deleted"}


# ---------------- Deals ----------------
@app.get("/api/brands/{brand_id}/deal", response_model=DealSchema)
def read_brand_deal(brand_id: int, db: Session = Depends(get_db)):
    deal = get_deal_by_brand(db, brand_id)
    if not deal:
        raise HTTPException(status_code=404, detail="Deal not found")
    return deal


@app.put("/api/brands/{brand_id}/deal", response_model=DealSchema)
def upsert_brand_deal(brand_id: int, payload: DealUpsertSchema, db: Session = Depends(get_db)):
    deal = create_or_update_deal(db, brand_id, payload)
    if not deal:
        raise HTTPException(status_code=404, detail="Brand not found")
    return deal


@app.delete("/api/brands/{brand_id}/deal")
def delete_brand_deal(brand_id: int, db: Session = Depends(get_db)):
    if not delete_deal(db, brand_id):
        raise HTTPException(status_code=404, detail="Deal not found")
    return {"message": "Deleted"}


# ---------------- Communications ----------------
@app.get("/api/communications/recent", response_model=list[CommunicationLogSchema])
def read_recent_communications(limit: int = Query(10, ge=1, le=500), db: Session = Depends(get_db)):
    return get_recent_communications(db, limit=limit)


@app.post("/api/communications/", response_model=CommunicationSchema)
def create_new_communication(payload: CommunicationCreateSchema, db: Session = Depends(get_db)):
    comm = create_communication(db, payload)
    if not comm:
        raise HTTPException(status_code=404, detail="Brand not found")
    return comm


@app.put("/api/communications/{communication_id}", response_model=CommunicationSchema)
def update_existing_communication(communication_id: int, payload: CommunicationUpdateSchema, db: Session = Depends(get_db)):
    comm = update_communication(db, communication_id, payload)
    if not comm:
        raise HTTPException(status_code=404, detail="Communication not found")
    return comm


@app.delete("/api/communications/{communication_id}")
def delete_existing_communication(communication_id: int, db: Session = Depends(get_db)):
    if not delete_communication(db, communication_id):
        raise HTTPException(status_code=404, detail="Communication not found")
    return {"message": "Deleted"}


# ---------------- Documents ----------------
@app.post("/api/documents/", response_model=DocumentSchema)
def create_new_document(payload: DocumentCreateSchema, db: Session = Depends(get_db)):
    document = create_document(db, payload)
    if not document:
        raise HTTPException(status_code=404, detail="Brand not found")
    return document


@app.put("/api/documents/{document_id}", response_model=DocumentSchema)
def update_existing_document(document_id: int, payload: DocumentUpdateSchema, db: Session = Depends(get_db)):
    document = update_document(db, document_id, payload)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    return document


@app.delete("/api/documents/{document_id}")
def delete_existing_document(document_id: int, db: Session = Depends(get_db)):
    if not delete_document(db, document_id):
        raise HTTPException(status_code=404, detail="Document not found")
    return {"message": "Deleted"}


# ---------------- Tasks ----------------
@app.get("/api/tasks/upcoming", response_model=list[TaskWithBrandSchema])
def read_upcoming_tasks(limit: int = Query(10, ge=1, le=500), db: Session = Depends(get_db)):
    return get_upcoming_tasks(db, limit=limit)


@app.get("/api/tasks/overdue", response_model=list[TaskWithBrandSchema])
def read_overdue_tasks(db: Session = Depends(get_db)):
    return get_overdue_tasks(db)


@app.post("/api/tasks/", response_model=TaskSchema)
def create_new_task(payload: TaskCreateSchema, db: Session = Depends(get_db)):
    task = create_task(db, payload)
    if not task:
        raise HTTPException(status_code=404, detail="Brand not found")
    return task


@app.put("/api/tasks/{task_id}", response_model=TaskSchema)
def update_existing_task(task_id: int, payload: TaskUpdateSchema, db: Session = Depends(get_db)):
    task = update_task(db, task_id, payload)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@app.post("/api/tasks/{task_id}/toggle", response_model=TaskSchema)
def toggle_existing_task(task_id: int, db: Session = Depends(get_db)):
    task = toggle_task(db, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@app.delete("/api/tasks/{task_id}")
def delete_existing_task(task_id: int, db: Session = Depends(get_db)):
    if not delete_task(db, task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"message": "Deleted"}
