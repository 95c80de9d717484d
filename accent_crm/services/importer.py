"""
Import ponctuel du tableur des marques (feuille "Brands") vers les six tables.

Les heuristiques de normalisation (statut, conditions de paiement/livraison,
chaîne de contact) sont isolées ici pour être testées sans fichier Excel.
"""
import logging
import math
import re
from dataclasses import dataclass, field

import pandas as pd
from sqlalchemy.orm import Session

from accent_crm.models.brand import Brand
from accent_crm.models.contact import Contact
from accent_crm.models.deal import Deal
from accent_crm.models.document import Document
from accent_crm.models.task import Task

logger = logging.getLogger(__name__)

SHEET_NAME = "Brands"
# Les trois premières lignes de données sont des lignes de légende
HEADER_ROWS = 3
SKIPPED_NAMES = {"Connected", "Not relevant at all/now", "KEY"}

_EMAIL_IN_PARENS = re.compile(r"\(([^)]+@[^)]+)\)")
_CONTACT_PREFIX = re.compile(r"^(Info|Contact form|Contact):?\s*", re.IGNORECASE)


@dataclass
class ImportReport:
    imported: int = 0
    skipped: int = 0
    errors: int = 0
    messages: list[str] = field(default_factory=list)


def _blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def clean(value):
    """Cellule vide / NaN -> None ; chaînes nettoyées."""
    if _blank(value):
        return None
    if isinstance(value, str):
        return value.strip()
    return value


def map_status(brand_name: str | None) -> str:
    if not brand_name:
        return "prospect"
    name = brand_name.lower()
    if "connected" in name:
        return "active"
    if "not relevant" in name:
        return "not_relevant"
    return "prospect"


def map_deal_stage(status: str) -> str:
    if status == "active":
        return "won"
    if status == "not_relevant":
        return "lost"
    return "lead"


def parse_contact(contact_string: str | None) -> dict:
    """'Info: Jane Doe (jane@x.com)' -> {'name': 'Jane Doe', 'email': 'jane@x.com'}"""
    if not contact_string:
        return {"name": None, "email": None}
    match = _EMAIL_IN_PARENS.search(contact_string)
    email = match.group(1).strip() if match else None
    name = contact_string.split("(")[0].strip()
    name = _CONTACT_PREFIX.sub("", name)
    return {"name": name or None, "email": email}


def normalize_payment_terms(terms):
    if _blank(terms):
        return None
    t = str(terms).lower().strip()
    if "prepay" in t:
        return "Prepayment"
    if "net" in t and "30" in t:
        return "Net 30"
    if "net" in t and "14" in t:
        return "Net 14"
    if "ex works" in t:
        return "EX WORKS"
    return terms


def normalize_shipping_terms(terms):
    if _blank(terms):
        return None
    t = str(terms).lower().strip()
    if "exw" in t or "ex works" in t:
        return "EXW"
    if "dap" in t:
        return "DAP"
    return terms


def _as_float(value):
    value = clean(value)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_priority(value):
    value = _as_float(value)
    if value is None:
        return None
    value = int(value)
    return value if value in (1, 2, 3) else None


def _as_date(value):
    value = clean(value)
    if value is None:
        return None
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date()


def read_rows(path: str) -> list[dict]:
    """Lit la feuille et renvoie les lignes utiles (légendes et lignes sans marque exclues)."""
    df = pd.read_excel(path, sheet_name=SHEET_NAME, engine="openpyxl")
    df = df.iloc[HEADER_ROWS:]
    rows = df.to_dict(orient="records")
    return [r for r in rows if isinstance(r.get("Brand"), str) and r["Brand"].strip()]


def import_row(db: Session, row: dict) -> bool:
    """Crée marque + contact + deal + documents + tâche pour une ligne. False si ignorée."""
    name = row["Brand"].strip()
    if name in SKIPPED_NAMES:
        return False

    status = map_status(name)
    brand = Brand(
        name=name,
        type=clean(row.get("Type")),
        website=clean(row.get("Website")),
        status=status,
        deal_stage=map_deal_stage(status),
        priority=_as_priority(row.get("Priority (1: Highest)")),
        excluded_categories=clean(row.get("Excluded categories")),
        comments=clean(row.get("Comments")),
        hide=bool(clean(row.get("Hide"))),
    )
    db.add(brand)
    db.flush()  # id attribué avant les lignes rattachées

    contact_cell = clean(row.get("Contact person"))
    contact_email = clean(row.get("Contact Email"))
    if contact_cell or contact_email:
        parsed = parse_contact(str(contact_cell) if contact_cell else None)
        db.add(Contact(
            brand_id=brand.id,
            name=parsed["name"],
            email=contact_email or parsed["email"],
            is_primary=True,
        ))

    discount = clean(row.get("Discount"))
    payment = clean(row.get("Payment Terms"))
    shipping = clean(row.get("Shipping terms"))
    if discount is not None or payment or shipping:
        db.add(Deal(
            brand_id=brand.id,
            discount=_as_float(discount),
            payment_terms=normalize_payment_terms(payment),
            shipping_terms=normalize_shipping_terms(shipping),
            freight_free_limit=_as_float(row.get("Freight free limit")),
            rrp_inc_vat=_as_float(row.get("rrp inc VAT")),
            rrp_exc_vat=_as_float(row.get("rrp exc VAT")),
            dealer_access=clean(row.get("Dealer Access")),
            first_purchase_date=_as_date(row.get("1st purchase made")),
        ))

    master = clean(row.get("Master data"))
    if master and str(master) not in ("no", "No"):
        db.add(Document(brand_id=brand.id, document_type="master_data", name="Master Data", url=str(master)))
    price_list = clean(row.get("Price list"))
    if price_list and str(price_list) != "Yes":
        db.add(Document(brand_id=brand.id, document_type="price_list", name="Price List", url=str(price_list)))
    images = clean(row.get("Images"))
    if images:
        db.add(Document(brand_id=brand.id, document_type="images", name="Images", url=str(images)))

    action = clean(row.get("Action"))
    if action:
        db.add(Task(brand_id=brand.id, title=str(action), status="pending", priority="medium"))
    return True


def import_rows(db: Session, rows: list[dict]) -> ImportReport:
    """Une transaction par ligne : une ligne en erreur n'interrompt pas l'import."""
    report = ImportReport()
    for row in rows:
        name = row.get("Brand")
        try:
            if import_row(db, row):
                db.commit()
                report.imported += 1
                if report.imported % 50 == 0:
                    logger.info("Imported %s brands...", report.imported)
            else:
                report.skipped += 1
        except Exception as exc:
            db.rollback()
            report.errors += 1
            report.messages.append(f"{name}: {exc}")
            logger.error("Error processing %s: %s", name, exc)
    return report
