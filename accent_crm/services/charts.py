import base64
import io
import logging

import matplotlib

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt  # noqa: E402

logger = logging.getLogger(__name__)

COLORS = ["#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6", "#ec4899", "#06b6d4", "#84cc16", "#f97316", "#6366f1"]


def _to_base64(fig) -> str:
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=160)
    plt.close(fig)
    return base64.b64encode(buf.getvalue()).decode("ascii")


def build_pie_chart(items: list[dict], title: str) -> str | None:
    """Camembert PNG (base64) à partir des éléments {name, value} d'une ventilation."""
    labels = [str(i.get("name") or "") for i in items or []]
    values = [float(i.get("value") or 0) for i in items or []]
    if not values or not sum(values):
        return None
    fig, ax = plt.subplots(figsize=(6, 4.2))
    try:
        ax.pie(
            values,
            labels=labels,
            colors=[COLORS[i % len(COLORS)] for i in range(len(values))],
            autopct="%1.0f%%",
            startangle=90,
            textprops={"fontsize": 9, "color": "#334155"},
        )
        ax.set_title(title, fontsize=14, fontweight="bold", color="#0f172a")
        ax.axis("equal")
        fig.tight_layout()
        return _to_base64(fig)
    except Exception:
        plt.close(fig)
        logger.exception("Pie chart rendering failed: %s", title)
        return None


def build_bar_chart(items: list[dict], title: str, unit: str | None = None) -> str | None:
    """Barres horizontales PNG (base64), plus grande valeur en haut."""
    cats = [str(i.get("name") or "") for i in items or []]
    data = [float(i.get("value") or 0) for i in items or []]
    if not data:
        return None
    fig, ax = plt.subplots(figsize=(7.2, max(2.4, 0.5 * len(cats) + 1.2)))
    try:
        positions = list(range(len(cats)))
        bars = ax.barh(positions, data, height=0.5, color="#2563eb", alpha=0.85)
        ax.set_yticks(positions)
        ax.set_yticklabels(cats)
        ax.invert_yaxis()
        ax.set_title(title, fontsize=14, fontweight="bold", color="#0f172a")
        if unit:
            ax.set_xlabel(unit, fontsize=11)
        ax.grid(True, axis="x", linestyle="--", alpha=0.3)
        max_val = max(data)
        for bar, value in zip(bars, data):
            xpos = bar.get_width() + (0.01 * max_val if max_val else 0.1)
            ax.text(xpos, bar.get_y() + bar.get_height() / 2, f"{value:.0f}", va="center", fontsize=9, color="#334155")
        for spine in ax.spines.values():
            spine.set_visible(False)
        fig.tight_layout()
        return _to_base64(fig)
    except Exception:
        plt.close(fig)
        logger.exception("Bar chart rendering failed: %s", title)
        return None


def build_analytics_charts(analytics: dict) -> dict:
    return {
        "sectors": build_bar_chart(analytics.get("sectors") or [], "Project sectors", unit="Brands"),
        "categories": build_bar_chart(analytics.get("categories") or [], "Design categories", unit="Brands"),
        "countries": build_bar_chart(analytics.get("countries") or [], "Top 10 countries of origin", unit="Brands"),
        "statuses": build_pie_chart(analytics.get("statuses") or [], "Status distribution"),
        "deal_stages": build_pie_chart(analytics.get("deal_stages") or [], "Deal pipeline"),
    }
