from shootbook.models.session import PhotoSession, SessionAvailability, SessionImage
from shootbook.models.user import User

__all__ = [
    "PhotoSession",
    "SessionAvailability",
    "SessionImage",
    "User",
]
