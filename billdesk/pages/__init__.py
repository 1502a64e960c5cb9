from __future__ import annotations

from .customers import render_customers
from .dashboards import (
    render_customer_health,
    render_finance_dashboard,
    render_recurring_dashboard,
    render_worklist,
)
from ._shared import set_page
from .home import render_home
from .invoices import render_invoices
from .orders import render_orders
from .pricelist import render_pricelist
from .recurring_plans import render_recurring_plans
from .settings import render_settings
from .users import render_users

# Import routes for side effects. Registers @ui.page decorators
from . import login
