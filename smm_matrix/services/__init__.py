"""smm_matrix.services
======================
Mini-README: Declares the service layer package. Services own every database read and
write so routers only translate between HTTP forms, templates, and these helpers.
"""

from .account_service import (
    EmailAlreadyRegisteredError,
    assign_role_by_email,
    authenticate,
    count_users,
    create_account,
    delete_account,
    fetch_user_by_email,
    list_users,
    normalize_email,
    set_role,
    toggle_unsubscribed,
)
from .commerce_service import (
    DashboardStats,
    InvalidStatusTransitionError,
    close_ticket,
    compute_dashboard_stats,
    create_ticket,
    list_open_tickets,
    place_order,
    recent_orders,
    subscribe_email,
    transition_order,
    transition_ticket,
    update_order_status,
)
from .content_service import (
    create_post,
    fetch_plan,
    list_plans,
    list_posts,
    list_reviews,
    view_post,
)
from .metrics_service import (
    append_snapshot,
    ensure_history,
    latest_metric,
    list_metrics,
    parse_count,
)
from .seed_service import seed_catalogue, seed_demo_accounts, seed_demo_data

__all__ = [
    "EmailAlreadyRegisteredError",
    "assign_role_by_email",
    "authenticate",
    "count_users",
    "create_account",
    "delete_account",
    "fetch_user_by_email",
    "list_users",
    "normalize_email",
    "set_role",
    "toggle_unsubscribed",
    "DashboardStats",
    "InvalidStatusTransitionError",
    "close_ticket",
    "compute_dashboard_stats",
    "create_ticket",
    "list_open_tickets",
    "place_order",
    "recent_orders",
    "subscribe_email",
    "transition_order",
    "transition_ticket",
    "update_order_status",
    "create_post",
    "fetch_plan",
    "list_plans",
    "list_posts",
    "list_reviews",
    "view_post",
    "append_snapshot",
    "ensure_history",
    "latest_metric",
    "list_metrics",
    "parse_count",
    "seed_catalogue",
    "seed_demo_accounts",
    "seed_demo_data",
]
