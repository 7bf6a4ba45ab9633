from .buildings import Building
from .documents import Document, DocumentStatusEnum
from .events import Event
from .tenants import Tenant

__all__ = [
    "Building",
    "Document",
    "DocumentStatusEnum",
    "Event",
    "Tenant",
]
