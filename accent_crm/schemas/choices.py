from typing import Literal

# Valeurs autorisées (colonnes texte côté base)
BRAND_STATUSES = ("prospect", "negotiation", "contract", "active", "inactive", "not_relevant")
DEAL_STAGES = ("lead", "qualified", "proposal", "negotiation", "won", "lost")
COMMUNICATION_TYPES = ("email", "phone", "meeting")
DOCUMENT_TYPES = ("master_data", "price_list", "images", "contract", "other")
TASK_STATUSES = ("pending", "in_progress", "completed", "cancelled")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")

PROJECT_SECTORS = (
    "Residential",
    "Hospitality",
    "Retail",
    "Workspace",
    "Public Spaces",
    "Marine",
    "Airports",
    "Healthcare",
    "Education",
    "Entertainment",
)
DESIGN_CATEGORIES = ("Furniture", "Lighting", "Accessories", "Textiles", "Rugs", "Art", "Home Decor", "Tableware")

BrandStatus = Literal["prospect", "negotiation", "contract", "active", "inactive", "not_relevant"]
DealStage = Literal["lead", "qualified", "proposal", "negotiation", "won", "lost"]
CommunicationType = Literal["email", "phone", "meeting"]
DocumentType = Literal["master_data", "price_list", "images", "contract", "other"]
TaskStatus = Literal["pending", "in_progress", "completed", "cancelled"]
TaskPriority = Literal["low", "medium", "high", "urgent"]
