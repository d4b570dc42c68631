"""
Class routes.
"""

from gateway.routes.resources import build_resource_router
from gateway.schemas import ClassPayload
from shared.firebase_constants import CLASSES_COLLECTION

router = build_resource_router(CLASSES_COLLECTION, ClassPayload, label="Class")
