from .base import Base
from .agency import Agency
from .contact import Contact
from .contact_view import ContactView
from .quota_snapshot import QuotaSnapshot

__all__ = [
    "Base",
    "Agency",
    "Contact",
    "ContactView",
    "QuotaSnapshot",
]
