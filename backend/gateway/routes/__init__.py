"""
Route modules mounted by ``gateway.app``.
"""

from gateway.routes import attendance, auth, classes, grades, health, payments, users

# (module, mount path below the API prefix)
ROUTE_MODULES = (
    (auth, "/auth"),
    (users, "/users"),
    (classes, "/classes"),
    (grades, "/grades"),
    (attendance, "/attendance"),
    (payments, "/payments"),
    (health, "/health"),
)
