from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class TaskCategory(Enum):
    ENTREES = "entrees"
    PLATS = "plats"
    DESSERTS = "desserts"
    MISE_EN_PLACE = "mise_en_place"
    NETTOYAGE = "nettoyage"
    COMMANDES = "commandes"
    AUTRE = "autre"


class TaskPriority(Enum):
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


class RecurringType(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


@dataclass
class Task:
    """
    Kitchen task. ``recurring`` is ``None`` for one-off tasks.
    """
    id: str
    title: str
    category: TaskCategory
    priority: TaskPriority
    completed: bool
    recurring: Optional[RecurringType]
    created_at: datetime
    archived: bool
    order: int
    completed_at: Optional[datetime] = None
    estimated_time: Optional[float] = None
    notes: Optional[str] = None
