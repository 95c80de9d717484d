from accent_crm.database import Base
from .brand import Brand
from .contact import Contact
from .deal import Deal
from .communication import Communication
from .document import Document
from .task import Task


__all__ = [
    "Base",
    "Brand",
    "Contact",
    "Deal",
    "Communication",
    "Document",
    "Task",
]
