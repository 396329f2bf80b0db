# routers/__init__.py
from . import (
     auth,
     users,
     properties,
     units,
     tenants,
     payments,
     mpesa,
     settings,
     reminders,
     expenses,
     activity_logs,
     dashboard,
     reports,
)

all_routers = [
     auth.router,
     users.router,
     properties.router,
     units.router,
     tenants.router,
     payments.router,
     mpesa.router,
     settings.router,
     reminders.router,
     expenses.router,
     activity_logs.router,
     dashboard.router,
     reports.router,
]
