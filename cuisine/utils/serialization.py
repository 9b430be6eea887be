"""
Serialization of domain entities to the JSON wire format used by backup
files and the local store.
"""

import base64
import json
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from cuisine.models.backup import BACKUP_COLLECTIONS, BackupPayload
from cuisine.models.equipment import Equipment, OilChangeRecord, TemperatureRecord
from cuisine.models.invoice import Invoice, InvoiceItem, PriceHistory, PricePoint
from cuisine.models.settings import AppSettings
from cuisine.models.task import Task
from cuisine.models.traceability import ProductTrace


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


class JSONEncoder(json.JSONEncoder):
    """JSON encoder for application data types."""

    def default(self, obj):
        if isinstance(obj, datetime):
            return format_timestamp(obj)
        elif isinstance(obj, Enum):
            return obj.value
        elif isinstance(obj, (bytes, bytearray)):
            return base64.b64encode(bytes(obj)).decode("ascii")
        elif is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)
        return super().default(obj)


class DataSerializer:
    """Entity -> wire dictionary conversion (camelCase keys)."""

    @staticmethod
    def serialize_equipment(equipment: Equipment) -> Dict[str, Any]:
        return {
            "id": equipment.id,
            "name": equipment.name,
            "type": equipment.type.value,
            "minTemp": equipment.min_temp,
            "maxTemp": equipment.max_temp,
            "order": equipment.order,
        }

    @staticmethod
    def serialize_temperature_record(record: TemperatureRecord) -> Dict[str, Any]:
        return _drop_none({
            "id": record.id,
            "equipmentId": record.equipment_id,
            "temperature": record.temperature,
            "timestamp": format_timestamp(record.timestamp),
            "isCompliant": record.is_compliant,
            "signature": record.signature,
        })

    @staticmethod
    def serialize_oil_change_record(record: OilChangeRecord) -> Dict[str, Any]:
        return _drop_none({
            "id": record.id,
            "fryerId": record.fryer_id,
            "changedAt": format_timestamp(record.changed_at),
            "action": record.action.value,
            "operator": record.operator,
        })

    @staticmethod
    def serialize_task(task: Task) -> Dict[str, Any]:
        data = _drop_none({
            "id": task.id,
            "title": task.title,
            "category": task.category.value,
            "priority": task.priority.value,
            "completed": task.completed,
            "createdAt": format_timestamp(task.created_at),
            "completedAt": format_timestamp(task.completed_at) if task.completed_at else None,
            "archived": task.archived,
            "order": task.order,
            "estimatedTime": task.estimated_time,
            "notes": task.notes,
        })
        # One-off tasks carry an explicit null
        data["recurring"] = task.recurring.value if task.recurring else None
        return data

    @staticmethod
    def serialize_product_trace(trace: ProductTrace, include_binary: bool = False) -> Dict[str, Any]:
        data = _drop_none({
            "id": trace.id,
            "barcode": trace.barcode,
            "photoUrl": trace.photo_url,
            "productName": trace.product_name,
            "supplier": trace.supplier,
            "lotNumber": trace.lot_number,
            "receptionDate": format_timestamp(trace.reception_date),
            "expirationDate": format_timestamp(trace.expiration_date),
            "category": trace.category,
            "allergens": list(trace.allergens),
            "scannedAt": format_timestamp(trace.scanned_at),
        })
        if include_binary and trace.photo is not None:
            data["photo"] = base64.b64encode(trace.photo).decode("ascii")
        return data

    @staticmethod
    def serialize_invoice_item(item: InvoiceItem) -> Dict[str, Any]:
        return _drop_none({
            "designation": item.designation,
            "quantity": item.quantity,
            "unitPriceHT": item.unit_price_ht,
            "totalPriceHT": item.total_price_ht,
            "conditioningQuantity": item.conditioning_quantity,
            "conditioningUnit": item.conditioning_unit.value if item.conditioning_unit else None,
        })

    @staticmethod
    def serialize_invoice(invoice: Invoice, include_binary: bool = False) -> Dict[str, Any]:
        images: List[str] = []
        if include_binary:
            images = [base64.b64encode(image).decode("ascii") for image in invoice.images]
        return {
            "id": invoice.id,
            "images": images,
            "supplier": invoice.supplier,
            "invoiceNumber": invoice.invoice_number,
            "invoiceDate": format_timestamp(invoice.invoice_date),
            "items": [DataSerializer.serialize_invoice_item(item) for item in invoice.items],
            "totalHT": invoice.total_ht,
            "totalTVA": invoice.total_tva,
            "totalTTC": invoice.total_ttc,
            "ocrText": invoice.ocr_text,
            "tags": list(invoice.tags),
            "scannedAt": format_timestamp(invoice.scanned_at),
        }

    @staticmethod
    def serialize_price_point(point: PricePoint) -> Dict[str, Any]:
        return {"date": format_timestamp(point.date), "price": point.price}

    @staticmethod
    def serialize_price_history(history: PriceHistory) -> Dict[str, Any]:
        return {
            "id": history.id,
            "itemName": history.item_name,
            "supplier": history.supplier,
            "prices": [DataSerializer.serialize_price_point(point) for point in history.prices],
            "averagePrice": history.average_price,
            "minPrice": history.min_price,
            "maxPrice": history.max_price,
        }

    @staticmethod
    def serialize_settings(settings: AppSettings, include_secrets: bool = False) -> Dict[str, Any]:
        data = {
            "id": settings.id,
            "establishmentName": settings.establishment_name,
            "darkMode": settings.dark_mode,
            "onboardingDone": settings.onboarding_done,
            "priceAlertThreshold": settings.price_alert_threshold,
        }
        if include_secrets and settings.gemini_api_key:
            data["geminiApiKey"] = settings.gemini_api_key
        return data

    @staticmethod
    def serialize_record(collection: str, record: Any, local: bool = False) -> Dict[str, Any]:
        """
        Serialize one record of a named collection. ``local`` keeps binary
        blobs and secrets, which only the on-device store may hold.
        """
        if collection == "equipment":
            return DataSerializer.serialize_equipment(record)
        if collection == "temperatureRecords":
            return DataSerializer.serialize_temperature_record(record)
        if collection == "oilChangeRecords":
            return DataSerializer.serialize_oil_change_record(record)
        if collection == "tasks":
            return DataSerializer.serialize_task(record)
        if collection == "productTraces":
            return DataSerializer.serialize_product_trace(record, include_binary=local)
        if collection == "invoices":
            return DataSerializer.serialize_invoice(record, include_binary=local)
        if collection == "priceHistory":
            return DataSerializer.serialize_price_history(record)
        if collection == "settings":
            return DataSerializer.serialize_settings(record, include_secrets=local)
        raise ValueError(f"Unknown collection: {collection}")

    @staticmethod
    def serialize_payload(payload: BackupPayload) -> Dict[str, Any]:
        """Serialize a payload to the export document shape."""
        data: Dict[str, Any] = {
            "version": payload.version,
            "exportedAt": format_timestamp(payload.exported_at),
        }
        for attribute, wire_key in BACKUP_COLLECTIONS:
            data[wire_key] = [
                DataSerializer.serialize_record(wire_key, record)
                for record in getattr(payload, attribute)
            ]
        return data

    @staticmethod
    def to_json(obj: Any, indent: Optional[int] = 2) -> str:
        """Convert object to JSON string using custom encoder."""
        return json.dumps(obj, cls=JSONEncoder, indent=indent, ensure_ascii=False)
