"""smm_matrix.templating
========================
Mini-README: Shared Jinja2 environment for every router. Registers the formatting
filters and the globals used by the layout (brand name, year, display currency).
"""

from datetime import datetime
from pathlib import Path

from fastapi.templating import Jinja2Templates

from .config import get_settings
from .formatting import currency, paragraphs, stars

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

TEMPLATES = Jinja2Templates(directory=str(TEMPLATE_DIR))
TEMPLATES.env.filters["currency"] = lambda value: currency(value, get_settings().display_currency)
TEMPLATES.env.filters["stars"] = stars
TEMPLATES.env.filters["paragraphs"] = paragraphs
TEMPLATES.env.globals["current_year"] = datetime.utcnow().year
TEMPLATES.env.globals["brand_name"] = get_settings().app_name
