from shootbook.schemas.image import (
    ImageUploadRead,
    ImageUploadResponse,
    SessionImageRead,
)
from shootbook.schemas.session import (
    AvailabilityRead,
    DashboardRead,
    FieldErrorRead,
    PersistenceErrorDetail,
    ScheduleFields,
    SchedulePreview,
    SessionDetailRead,
    SessionForm,
    SessionRead,
    SlotRead,
    ValidationErrorDetail,
)

__all__ = [
    "AvailabilityRead",
    "DashboardRead",
    "FieldErrorRead",
    "ImageUploadRead",
    "ImageUploadResponse",
    "PersistenceErrorDetail",
    "ScheduleFields",
    "SchedulePreview",
    "SessionDetailRead",
    "SessionForm",
    "SessionImageRead",
    "SessionRead",
    "SlotRead",
    "ValidationErrorDetail",
]
