from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class EquipmentType(Enum):
    FRIDGE = "fridge"
    FREEZER = "freezer"
    COLD_ROOM = "cold_room"


class OilChangeAction(Enum):
    CHANGED = "changed"


@dataclass
class Equipment:
    """
    Cold-storage unit whose temperature is logged.
    """
    id: str
    name: str
    type: EquipmentType
    min_temp: float
    max_temp: float
    order: int


@dataclass
class TemperatureRecord:
    """
    A single temperature reading. ``equipment_id`` is a plain key into the
    equipment collection and is not checked on import.
    """
    id: str
    equipment_id: str
    temperature: float
    timestamp: datetime
    is_compliant: bool
    signature: Optional[str] = None


@dataclass
class OilChangeRecord:
    id: str
    fryer_id: str
    changed_at: datetime
    action: OilChangeAction = OilChangeAction.CHANGED
    operator: Optional[str] = None
