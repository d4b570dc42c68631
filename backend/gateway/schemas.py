"""
Pydantic schemas for the gateway API.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class ResourcePayload(BaseModel):
    """Base for resource payloads; extra fields are stored as given."""

    model_config = ConfigDict(extra="allow")


class UserPayload(ResourcePayload):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    display_name: Optional[str] = Field(default=None, max_length=200)
    role: Literal["admin", "teacher", "student", "parent"] = "student"


class ClassPayload(ResourcePayload):
    name: str = Field(..., min_length=1, max_length=200)
    teacher_id: Optional[str] = None
    room: Optional[str] = None
    schedule: Optional[str] = None


class GradePayload(ResourcePayload):
    student_id: str
    class_id: str
    score: float = Field(..., ge=0, le=100)
    term: Optional[str] = None


class AttendancePayload(ResourcePayload):
    student_id: str
    class_id: str
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    status: Literal["present", "absent", "late", "excused"] = "present"


class PaymentPayload(ResourcePayload):
    student_id: str
    amount: float = Field(..., gt=0)
    currency: str = Field(default="IDR", min_length=3, max_length=3)
    description: Optional[str] = None
    status: Literal["pending", "paid", "cancelled"] = "pending"


class DocumentResponse(BaseModel):
    id: str
    data: dict
    created_at: float
    updated_at: float


class DocumentListResponse(BaseModel):
    items: list[DocumentResponse]
    count: int


class VerifyTokenRequest(BaseModel):
    id_token: str = Field(..., min_length=1)


class PrincipalResponse(BaseModel):
    uid: str
    email: Optional[str] = None
    dev_mode: bool = False
    claims: dict = Field(default_factory=dict)


class ServerStatusResponse(BaseModel):
    status: str
    timestamp: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    auth_mode: Literal["firebase", "unauthenticated"]
    store: Literal["firestore", "memory"]
    project_id: Optional[str] = None


class FirestoreHealthResponse(BaseModel):
    ok: bool
    count: Optional[int] = None
    kind: Optional[str] = None
    cause: Optional[str] = None
