from datetime import datetime, timedelta

from accent_crm.models.brand import Brand
from accent_crm.schemas.brand import BrandCreateSchema, BrandUpdateSchema
from accent_crm.schemas.communication import CommunicationCreateSchema
from accent_crm.schemas.contact import ContactCreateSchema, ContactUpdateSchema
from accent_crm.schemas.deal import DealUpsertSchema
from accent_crm.schemas.document import DocumentCreateSchema
from accent_crm.schemas.task import TaskCreateSchema
from accent_crm.services.brands import (
    apply_filters,
    count_active_filters,
    create_brand,
    delete_brand,
    get_brand_with_relations,
    get_brands,
    update_brand,
)
from accent_crm.services.communications import create_communication, get_recent_communications
from accent_crm.services.contacts import create_contact, delete_contact, get_contacts_by_brand, update_contact
from accent_crm.services.deals import create_or_update_deal, get_deal_by_brand, get_deals_by_brand_ids
from accent_crm.services.documents import create_document
from accent_crm.services.tasks import (
    create_task,
    filter_tasks,
    get_overdue_tasks,
    get_upcoming_tasks,
    list_tasks,
    toggle_task,
)


def _brand(db, name="Muuto", **kw):
    return create_brand(db, BrandCreateSchema(name=name, **kw))


def test_create_brand_applies_defaults(db):
    brand = _brand(db, project_sectors=["Retail", "Retail", " "])
    assert brand.status == "prospect"
    assert brand.deal_stage == "lead"
    assert brand.hide is False
    assert brand.project_sectors == ["Retail"]
    assert brand.date_added is not None


def test_brand_with_relations_without_deal(db):
    brand = _brand(db)
    data = get_brand_with_relations(db, brand.id)
    assert data["name"] == "Muuto"
    assert data["deal"] is None
    assert data["contacts"] == []
    assert data["communications"] == []
    assert data["documents"] == []
    assert data["tasks"] == []
    assert get_brand_with_relations(db, 9999) is None


def test_brand_with_relations_orders_children(db):
    brand = _brand(db)
    now = datetime(2025, 1, 10)
    create_communication(db, CommunicationCreateSchema(brand_id=brand.id, date=now - timedelta(days=5), subject="old"))
    create_communication(db, CommunicationCreateSchema(brand_id=brand.id, date=now, subject="new"))
    create_task(db, TaskCreateSchema(brand_id=brand.id, title="no date"))
    create_task(db, TaskCreateSchema(brand_id=brand.id, title="later", due_date=now + timedelta(days=3)))
    create_task(db, TaskCreateSchema(brand_id=brand.id, title="sooner", due_date=now + timedelta(days=1)))
    create_document(db, DocumentCreateSchema(brand_id=brand.id, name="Price list", url="https://x/p.pdf", document_type="price_list"))

    data = get_brand_with_relations(db, brand.id)
    assert [c.subject for c in data["communications"]] == ["new", "old"]
    assert [t.title for t in data["tasks"]] == ["sooner", "later", "no date"]
    assert data["documents"][0].document_type == "price_list"


def test_communication_updates_last_contact_date(db):
    brand = _brand(db)
    when = datetime(2025, 3, 4, 10, 30)
    create_communication(db, CommunicationCreateSchema(brand_id=brand.id, date=when, type="phone"))
    db.refresh(brand)
    assert brand.last_contact_date == when

    comm = create_communication(db, CommunicationCreateSchema(brand_id=brand.id))
    assert comm.date is not None
    assert create_communication(db, CommunicationCreateSchema(brand_id=9999)) is None


def test_recent_communications_carry_brand_name(db):
    brand = _brand(db, name="Hay")
    create_communication(db, CommunicationCreateSchema(brand_id=brand.id, subject="Intro"))
    recent = get_recent_communications(db, limit=5)
    assert recent[0].brand_name == "Hay"


def test_deal_upsert_keeps_one_deal_per_brand(db):
    brand = _brand(db)
    first = create_or_update_deal(db, brand.id, DealUpsertSchema(discount=0.3, payment_terms="Net 30"))
    second = create_or_update_deal(db, brand.id, DealUpsertSchema(shipping_terms="EXW"))
    assert first.id == second.id
    deal = get_deal_by_brand(db, brand.id)
    assert deal.discount == 0.3
    assert deal.shipping_terms == "EXW"
    assert create_or_update_deal(db, 9999, DealUpsertSchema(discount=0.1)) is None
    assert get_deals_by_brand_ids(db, []) == {}


def test_only_one_primary_contact(db):
    brand = _brand(db)
    a = create_contact(db, ContactCreateSchema(brand_id=brand.id, name="A", email="a@x.com", is_primary=True))
    b = create_contact(db, ContactCreateSchema(brand_id=brand.id, name="B", email="b@x.com", is_primary=True))
    db.refresh(a)
    assert not a.is_primary
    assert b.is_primary

    update_contact(db, a.id, ContactUpdateSchema(is_primary=True))
    primaries = [c.name for c in get_contacts_by_brand(db, brand.id) if c.is_primary]
    assert primaries == ["A"]


def test_deleting_contact_leaves_other_brands_untouched(db):
    muuto = _brand(db)
    hay = _brand(db, name="Hay")
    only = create_contact(db, ContactCreateSchema(brand_id=muuto.id, name="A", email="a@x.com"))
    create_contact(db, ContactCreateSchema(brand_id=hay.id, name="B", email="b@x.com"))
    assert delete_contact(db, only.id)
    assert get_contacts_by_brand(db, muuto.id) == []
    assert len(get_contacts_by_brand(db, hay.id)) == 1


def test_task_toggle_round_trip(db):
    brand = _brand(db)
    task = create_task(db, TaskCreateSchema(brand_id=brand.id, title="Call"))
    task = toggle_task(db, task.id)
    assert task.status == "completed"
    assert task.completed_at is not None
    task = toggle_task(db, task.id)
    assert task.status == "pending"
    assert task.completed_at is None
    assert toggle_task(db, 9999) is None


def test_upcoming_and_overdue_tasks(db):
    brand = _brand(db, name="Hay")
    now = datetime(2025, 6, 1)
    late = create_task(db, TaskCreateSchema(brand_id=brand.id, title="late", due_date=now - timedelta(days=2)))
    create_task(db, TaskCreateSchema(brand_id=brand.id, title="soon", due_date=now + timedelta(days=2)))
    done = create_task(db, TaskCreateSchema(brand_id=brand.id, title="done", due_date=now - timedelta(days=5)))
    toggle_task(db, done.id)

    upcoming = get_upcoming_tasks(db, limit=5)
    assert [t.title for t in upcoming] == ["late", "soon"]
    assert upcoming[0].brand_name == "Hay"
    assert [t.id for t in get_overdue_tasks(db, now=now)] == [late.id]

    tasks = list_tasks(db)
    assert {t.title for t in filter_tasks(tasks, "completed", now)} == {"done"}
    assert {t.title for t in filter_tasks(tasks, "overdue", now)} == {"late"}
    assert {t.title for t in filter_tasks(tasks, "pending", now)} == {"late", "soon"}
    assert len(filter_tasks(tasks, "all", now)) == 3


def test_get_brands_hides_hidden_and_searches(db):
    _brand(db, name="Muuto")
    _brand(db, name="Hay")
    _brand(db, name="Secret", hide=True)
    assert [b.name for b in get_brands(db)] == ["Hay", "Muuto"]
    assert [b.name for b in get_brands(db, search="muu")] == ["Muuto"]


def test_update_and_delete_brand(db):
    brand = _brand(db)
    updated = update_brand(db, brand.id, BrandUpdateSchema(status="active", priority=2))
    assert updated.status == "active"
    assert updated.priority == 2
    assert updated.name == "Muuto"
    assert update_brand(db, 9999, BrandUpdateSchema(name="x")) is None
    assert delete_brand(db, brand.id) is True
    assert delete_brand(db, brand.id) is False


def test_apply_filters(db):
    a = _brand(db, name="Muuto", type="Furniture", country_of_origin="Denmark", project_sectors=["Retail"], priority=1)
    b = _brand(db, name="Flos", type="Lighting", country_of_origin="Italy", design_categories=["Lighting"])
    create_or_update_deal(db, a.id, DealUpsertSchema(discount=0.4))
    create_or_update_deal(db, b.id, DealUpsertSchema(discount=0, dealer_access="Portal"))
    brands = db.query(Brand).order_by(Brand.name).all()
    deals = get_deals_by_brand_ids(db, [x.id for x in brands])

    assert [x.name for x in apply_filters(brands, {"search": "light"})] == ["Flos"]
    assert [x.name for x in apply_filters(brands, {"country_of_origin": "den"})] == ["Muuto"]
    assert [x.name for x in apply_filters(brands, {"project_sector": "Retail"})] == ["Muuto"]
    assert [x.name for x in apply_filters(brands, {"design_category": "Lighting"})] == ["Flos"]
    assert [x.name for x in apply_filters(brands, {"priority": "1"})] == ["Muuto"]
    assert [x.name for x in apply_filters(brands, {"has_discount": "yes"}, deals)] == ["Muuto"]
    assert [x.name for x in apply_filters(brands, {"has_dealer_access": "yes"}, deals)] == ["Flos"]
    assert count_active_filters({"search": "x", "status": "", "priority": "1"}) == 2
