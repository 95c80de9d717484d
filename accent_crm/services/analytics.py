"""Agrégations du tableau de bord et de la page analytics (calculs purs, en mémoire)."""
from collections import Counter
from datetime import date, datetime

from accent_crm.schemas.choices import PROJECT_SECTORS

UNASSIGNED = "Unassigned"
UNKNOWN = "Unknown"
WEAK_SECTOR_THRESHOLD = 5
TOP_COUNTRIES = 10


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def compute_dashboard_stats(brands, tasks, today: date | None = None) -> dict:
    today = today or date.today()
    by_status: dict[str, int] = {}
    by_stage: dict[str, int] = {}
    for b in brands:
        by_status[b.status] = by_status.get(b.status, 0) + 1
        by_stage[b.deal_stage] = by_stage.get(b.deal_stage, 0) + 1
    overdue = sum(
        1 for b in brands
        if b.next_followup_date is not None and _as_date(b.next_followup_date) <= today
    )
    return {
        "total_partners": len(brands),
        "active_partners": sum(1 for b in brands if b.status == "active"),
        "in_negotiation": sum(1 for b in brands if b.deal_stage == "negotiation"),
        "overdue_followups": overdue,
        "pending_tasks": sum(1 for t in tasks if t.status == "pending"),
        "by_status": by_status,
        "by_stage": by_stage,
    }


def humanize(value: str) -> str:
    """'not_relevant' -> 'Not relevant' (premier '_' seulement, comme les libellés d'origine)."""
    if not value:
        return ""
    return value[:1].upper() + value[1:].replace("_", " ", 1)


def percent(count: int, total: int) -> float:
    if not total:
        return 0.0
    return round(count / total * 100, 1)


def _items(counter: Counter, total: int, *, sort: bool = True, labels: bool = False) -> list[dict]:
    pairs = counter.most_common() if sort else list(counter.items())
    return [
        {
            "name": humanize(name) if labels else name,
            "key": name,
            "value": value,
            "percent": percent(value, total),
        }
        for name, value in pairs
    ]


def count_tags(brands, attr: str) -> Counter:
    """Un compte par tag et par marque ; sans tag -> 'Unassigned'."""
    counter: Counter = Counter()
    for b in brands:
        tags = getattr(b, attr, None) or []
        if tags:
            for tag in tags:
                counter[tag] += 1
        else:
            counter[UNASSIGNED] += 1
    return counter


def sector_breakdown(brands) -> list[dict]:
    return _items(count_tags(brands, "project_sectors"), len(brands))


def category_breakdown(brands) -> list[dict]:
    return _items(count_tags(brands, "design_categories"), len(brands))


def country_breakdown(brands, top: int = TOP_COUNTRIES) -> list[dict]:
    counter = Counter(b.country_of_origin or UNKNOWN for b in brands)
    return _items(counter, len(brands))[:top]


def status_breakdown(brands) -> list[dict]:
    return _items(Counter(b.status for b in brands), len(brands), sort=False, labels=True)


def deal_stage_breakdown(brands) -> list[dict]:
    return _items(Counter(b.deal_stage for b in brands), len(brands), sort=False, labels=True)


def coverage_gaps(sector_counts: Counter, reference=PROJECT_SECTORS) -> dict:
    missing = [s for s in reference if not sector_counts.get(s)]
    weak = [s for s, count in sector_counts.items() if count < WEAK_SECTOR_THRESHOLD]
    return {"missing_sectors": missing, "weak_sectors": weak}


def build_analytics(brands) -> dict:
    sector_counts = count_tags(brands, "project_sectors")
    category_counts = count_tags(brands, "design_categories")
    countries = Counter(b.country_of_origin or UNKNOWN for b in brands)
    return {
        "total_brands": len(brands),
        "sectors": sector_breakdown(brands),
        "categories": category_breakdown(brands),
        "countries": country_breakdown(brands),
        "statuses": status_breakdown(brands),
        "deal_stages": deal_stage_breakdown(brands),
        "sector_count": len([s for s in sector_counts if s != UNASSIGNED]),
        "category_count": len([c for c in category_counts if c != UNASSIGNED]),
        "country_count": len([c for c in countries if c != UNKNOWN]),
        **coverage_gaps(sector_counts),
    }
