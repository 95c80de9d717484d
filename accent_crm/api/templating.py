from pathlib import Path

from fastapi.templating import Jinja2Templates

from accent_crm.services.analytics import humanize

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


def fmt_date(value, fmt: str = "%d/%m/%Y") -> str:
    if not value:
        return ""
    try:
        return value.strftime(fmt)
    except AttributeError:
        return str(value)


templates.env.filters["humanize"] = humanize
templates.env.filters["fmt_date"] = fmt_date
