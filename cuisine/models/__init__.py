"""
Data models for the cuisine backup subsystem.
"""

from .backup import BACKUP_COLLECTIONS, BackupPayload, BackupSnapshot
from .equipment import (
    Equipment,
    EquipmentType,
    OilChangeAction,
    OilChangeRecord,
    TemperatureRecord,
)
from .invoice import IngredientUnit, Invoice, InvoiceItem, PriceHistory, PricePoint
from .settings import AppSettings
from .task import RecurringType, Task, TaskCategory, TaskPriority
from .traceability import ProductTrace

__all__ = [
    "BACKUP_COLLECTIONS",
    "BackupPayload",
    "BackupSnapshot",
    "Equipment",
    "EquipmentType",
    "TemperatureRecord",
    "OilChangeRecord",
    "OilChangeAction",
    "Task",
    "TaskCategory",
    "TaskPriority",
    "RecurringType",
    "ProductTrace",
    "Invoice",
    "InvoiceItem",
    "IngredientUnit",
    "PriceHistory",
    "PricePoint",
    "AppSettings",
]
