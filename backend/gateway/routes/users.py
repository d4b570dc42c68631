"""
User account routes.
"""

from gateway.routes.resources import build_resource_router
from gateway.schemas import UserPayload
from shared.firebase_constants import USERS_COLLECTION

router = build_resource_router(USERS_COLLECTION, UserPayload, label="User")
