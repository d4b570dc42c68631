"""
Attendance routes.
"""

from gateway.routes.resources import build_resource_router
from gateway.schemas import AttendancePayload
from shared.firebase_constants import ATTENDANCE_COLLECTION

router = build_resource_router(ATTENDANCE_COLLECTION, AttendancePayload, label="Attendance record")
