"""
Grade routes.
"""

from gateway.routes.resources import build_resource_router
from gateway.schemas import GradePayload
from shared.firebase_constants import GRADES_COLLECTION

router = build_resource_router(GRADES_COLLECTION, GradePayload, label="Grade")
