from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from .equipment import Equipment, OilChangeRecord, TemperatureRecord
from .invoice import Invoice, PriceHistory
from .settings import AppSettings
from .task import Task
from .traceability import ProductTrace


# (payload attribute, wire key / local store collection name)
BACKUP_COLLECTIONS: Tuple[Tuple[str, str], ...] = (
    ("equipment", "equipment"),
    ("temperature_records", "temperatureRecords"),
    ("oil_change_records", "oilChangeRecords"),
    ("tasks", "tasks"),
    ("product_traces", "productTraces"),
    ("invoices", "invoices"),
    ("price_history", "priceHistory"),
    ("settings", "settings"),
)


@dataclass
class BackupPayload:
    """
    Full exportable snapshot of the local dataset.

    Only built on demand (export) or reconstructed while validating an
    import; never persisted as such.
    """
    version: int
    exported_at: datetime
    equipment: List[Equipment] = field(default_factory=list)
    temperature_records: List[TemperatureRecord] = field(default_factory=list)
    oil_change_records: List[OilChangeRecord] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    product_traces: List[ProductTrace] = field(default_factory=list)
    invoices: List[Invoice] = field(default_factory=list)
    price_history: List[PriceHistory] = field(default_factory=list)
    settings: List[AppSettings] = field(default_factory=list)

    def collections(self) -> Dict[str, List[Any]]:
        """Collections keyed by their local store name."""
        return {
            wire_key: getattr(self, attribute)
            for attribute, wire_key in BACKUP_COLLECTIONS
        }

    def record_count(self) -> int:
        return sum(len(records) for records in self.collections().values())


@dataclass
class BackupSnapshot:
    """Serialized payload kept in the snapshot store under a fixed id."""
    id: str
    payload: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
