from collections import Counter
from datetime import date, datetime
from types import SimpleNamespace

from accent_crm.services.analytics import (
    build_analytics,
    compute_dashboard_stats,
    count_tags,
    country_breakdown,
    coverage_gaps,
    humanize,
    percent,
    sector_breakdown,
    status_breakdown,
)


def _brand(**kw):
    data = {
        "status": "prospect",
        "deal_stage": "lead",
        "project_sectors": None,
        "design_categories": None,
        "country_of_origin": None,
        "next_followup_date": None,
    }
    data.update(kw)
    return SimpleNamespace(**data)


def test_percentages_are_rounded_to_one_decimal():
    brands = [
        _brand(project_sectors=["Hospitality"]),
        _brand(project_sectors=["Hospitality"]),
        _brand(project_sectors=["Retail"]),
    ]
    items = sector_breakdown(brands)
    assert items[0] == {"name": "Hospitality", "key": "Hospitality", "value": 2, "percent": 66.7}
    assert items[1]["percent"] == 33.3
    assert percent(0, 0) == 0.0


def test_brand_without_tags_counts_as_unassigned():
    brands = [_brand(project_sectors=[]), _brand(project_sectors=None), _brand(project_sectors=["Marine"])]
    counts = count_tags(brands, "project_sectors")
    assert counts["Unassigned"] == 2
    assert counts["Marine"] == 1


def test_multi_tag_brand_counts_in_each_sector():
    brands = [_brand(project_sectors=["Retail", "Workspace"])]
    names = {i["name"] for i in sector_breakdown(brands)}
    assert names == {"Retail", "Workspace"}


def test_country_breakdown_keeps_top_ten_and_unknown():
    brands = [_brand(country_of_origin=f"C{i}") for i in range(12)]
    brands += [_brand(country_of_origin="Denmark")] * 3
    brands += [_brand(country_of_origin=None)] * 2
    items = country_breakdown(brands)
    assert len(items) == 10
    assert items[0]["name"] == "Denmark"
    assert items[1]["name"] == "Unknown"


def test_status_labels_are_humanized():
    items = status_breakdown([_brand(status="not_relevant"), _brand(status="active")])
    assert [i["name"] for i in items] == ["Not relevant", "Active"]
    assert items[0]["key"] == "not_relevant"


def test_humanize_replaces_first_underscore_only():
    assert humanize("a_b_c") == "A b_c"
    assert humanize("") == ""


def test_coverage_gaps():
    counts = Counter({"Hospitality": 7, "Retail": 2, "Unassigned": 1})
    gaps = coverage_gaps(counts)
    assert "Hospitality" not in gaps["missing_sectors"]
    assert "Marine" in gaps["missing_sectors"]
    assert "Retail" in gaps["weak_sectors"]
    assert "Hospitality" not in gaps["weak_sectors"]


def test_build_analytics_counts_exclude_placeholders():
    brands = [
        _brand(project_sectors=["Retail"], design_categories=["Lighting"], country_of_origin="Italy"),
        _brand(),
    ]
    data = build_analytics(brands)
    assert data["total_brands"] == 2
    assert data["sector_count"] == 1
    assert data["category_count"] == 1
    assert data["country_count"] == 1
    assert len(data["missing_sectors"]) == 9


def test_dashboard_stats():
    today = date(2025, 6, 1)
    brands = [
        _brand(status="active", deal_stage="won", next_followup_date=date(2025, 5, 1)),
        _brand(status="negotiation", deal_stage="negotiation", next_followup_date=date(2025, 6, 1)),
        _brand(next_followup_date=date(2025, 6, 2)),
    ]
    tasks = [
        SimpleNamespace(status="pending", due_date=datetime(2025, 1, 1)),
        SimpleNamespace(status="completed", due_date=None),
    ]
    stats = compute_dashboard_stats(brands, tasks, today=today)
    assert stats["total_partners"] == 3
    assert stats["active_partners"] == 1
    assert stats["in_negotiation"] == 1
    assert stats["overdue_followups"] == 2
    assert stats["pending_tasks"] == 1
    assert stats["by_status"] == {"active": 1, "negotiation": 1, "prospect": 1}
