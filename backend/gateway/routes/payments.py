"""
Payment routes.
"""

from gateway.routes.resources import build_resource_router
from gateway.schemas import PaymentPayload
from shared.firebase_constants import PAYMENTS_COLLECTION

router = build_resource_router(PAYMENTS_COLLECTION, PaymentPayload, label="Payment")
