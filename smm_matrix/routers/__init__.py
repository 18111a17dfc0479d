"""smm_matrix.routers
=====================
Mini-README: Router package initialiser exposing the FastAPI routers for the public
site, authentication, checkout, the admin dashboard, the staff panel, and the
performance charts.
"""

from . import admin, auth, checkout, performance, public, staff

__all__ = ["admin", "auth", "checkout", "performance", "public", "staff"]
