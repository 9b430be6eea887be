"""
Record parsers: turn one untyped object from a backup document into a typed
entity, or ``None`` when any required field rejects.

Optional fields that reject are left out of the result. Enum discriminators
only accept the exact tags the live app writes, so a tag introduced by a
newer version is refused instead of being imported as something else.
"""

from typing import Any, Callable, List, Optional, TypeVar

from cuisine.models.equipment import (
    Equipment,
    EquipmentType,
    OilChangeAction,
    OilChangeRecord,
    TemperatureRecord,
)
from cuisine.models.invoice import IngredientUnit, Invoice, InvoiceItem, PriceHistory, PricePoint
from cuisine.models.settings import AppSettings
from cuisine.models.task import RecurringType, Task, TaskCategory, TaskPriority
from cuisine.models.traceability import ProductTrace
from cuisine.utils.text import sanitize
from cuisine.utils.validators import FieldValidator as V

T = TypeVar("T")

_MISSING = object()


def parse_collection(value: Any, parser: Callable[[Any], Optional[T]]) -> Optional[List[T]]:
    """
    Parse every element of a list with ``parser``.

    Absent (``None``) reads as an empty list, a non-list rejects, and the
    first element that rejects rejects the whole list.
    """
    if value is None:
        return []
    if not isinstance(value, list):
        return None

    parsed: List[T] = []
    for entry in value:
        row = parser(entry)
        if row is None:
            return None
        parsed.append(row)
    return parsed


def _nested_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def parse_equipment(value: Any) -> Optional[Equipment]:
    if not V.is_mapping(value):
        return None

    id_ = V.to_sanitized_string(value.get("id"))
    name = V.to_sanitized_string(value.get("name"))
    type_ = V.to_enum(value.get("type"), EquipmentType)
    min_temp = V.to_number(value.get("minTemp"))
    max_temp = V.to_number(value.get("maxTemp"))
    order = V.to_int(value.get("order"))

    if not id_ or not name or type_ is None:
        return None
    if min_temp is None or max_temp is None or order is None:
        return None

    return Equipment(id=id_, name=name, type=type_, min_temp=min_temp, max_temp=max_temp, order=order)


def parse_temperature_record(value: Any) -> Optional[TemperatureRecord]:
    if not V.is_mapping(value):
        return None

    id_ = V.to_sanitized_string(value.get("id"))
    equipment_id = V.to_sanitized_string(value.get("equipmentId"))
    temperature = V.to_number(value.get("temperature"))
    timestamp = V.to_date(value.get("timestamp"))
    is_compliant = V.to_boolean(value.get("isCompliant"))

    if not id_ or not equipment_id or temperature is None or timestamp is None or is_compliant is None:
        return None

    return TemperatureRecord(
        id=id_,
        equipment_id=equipment_id,
        temperature=temperature,
        timestamp=timestamp,
        is_compliant=is_compliant,
        signature=V.to_optional_sanitized_string(value.get("signature")),
    )


def parse_oil_change_record(value: Any) -> Optional[OilChangeRecord]:
    if not V.is_mapping(value):
        return None

    id_ = V.to_sanitized_string(value.get("id"))
    fryer_id = V.to_sanitized_string(value.get("fryerId"))
    changed_at = V.to_date(value.get("changedAt"))
    action = V.to_enum(value.get("action"), OilChangeAction)

    if not id_ or not fryer_id or changed_at is None or action is None:
        return None

    return OilChangeRecord(
        id=id_,
        fryer_id=fryer_id,
        changed_at=changed_at,
        action=action,
        operator=V.to_optional_sanitized_string(value.get("operator")),
    )


def parse_task(value: Any) -> Optional[Task]:
    if not V.is_mapping(value):
        return None

    id_ = V.to_sanitized_string(value.get("id"))
    title = V.to_sanitized_string(value.get("title"))
    category = V.to_enum(value.get("category"), TaskCategory)
    priority = V.to_enum(value.get("priority"), TaskPriority)
    completed = V.to_boolean(value.get("completed"))
    created_at = V.to_date(value.get("createdAt"))
    archived = V.to_boolean(value.get("archived"))
    order = V.to_int(value.get("order"))

    if not id_ or not title or category is None or priority is None:
        return None
    if completed is None or created_at is None or archived is None or order is None:
        return None

    # The key is required; an explicit null marks a one-off task
    raw_recurring = value.get("recurring", _MISSING)
    if raw_recurring is None:
        recurring = None
    else:
        recurring = V.to_enum(raw_recurring, RecurringType)
        if recurring is None:
            return None

    return Task(
        id=id_,
        title=title,
        category=category,
        priority=priority,
        completed=completed,
        recurring=recurring,
        created_at=created_at,
        archived=archived,
        order=order,
        completed_at=V.to_date(value.get("completedAt")),
        estimated_time=V.to_number(value.get("estimatedTime")),
        notes=V.to_optional_sanitized_string(value.get("notes")),
    )


def parse_product_trace(value: Any) -> Optional[ProductTrace]:
    if not V.is_mapping(value):
        return None

    id_ = V.to_sanitized_string(value.get("id"))
    product_name = V.to_sanitized_string(value.get("productName"))
    supplier = V.to_sanitized_string(value.get("supplier"))
    lot_number = V.to_sanitized_string(value.get("lotNumber"))
    reception_date = V.to_date(value.get("receptionDate"))
    expiration_date = V.to_date(value.get("expirationDate"))
    category = V.to_sanitized_string(value.get("category"))
    scanned_at = V.to_date(value.get("scannedAt"))

    if not id_ or not product_name or not supplier or not lot_number or not category:
        return None
    if reception_date is None or expiration_date is None or scanned_at is None:
        return None

    # Binary photos never come in through a backup
    return ProductTrace(
        id=id_,
        product_name=product_name,
        supplier=supplier,
        lot_number=lot_number,
        reception_date=reception_date,
        expiration_date=expiration_date,
        category=category,
        scanned_at=scanned_at,
        barcode=V.to_optional_sanitized_string(value.get("barcode")),
        photo_url=V.to_optional_sanitized_string(value.get("photoUrl")),
        allergens=V.to_sanitized_string_list(value.get("allergens")),
    )


def parse_invoice_item(value: Any) -> Optional[InvoiceItem]:
    if not V.is_mapping(value):
        return None

    designation = V.to_sanitized_string(value.get("designation"))
    quantity = V.to_number(value.get("quantity"))
    unit_price_ht = V.to_number(value.get("unitPriceHT"))
    total_price_ht = V.to_number(value.get("totalPriceHT"))

    if not designation or quantity is None or unit_price_ht is None or total_price_ht is None:
        return None

    return InvoiceItem(
        designation=designation,
        quantity=quantity,
        unit_price_ht=unit_price_ht,
        total_price_ht=total_price_ht,
        conditioning_quantity=V.to_number(value.get("conditioningQuantity")),
        conditioning_unit=V.to_enum(value.get("conditioningUnit"), IngredientUnit),
    )


def parse_invoice(value: Any) -> Optional[Invoice]:
    if not V.is_mapping(value):
        return None

    id_ = V.to_sanitized_string(value.get("id"))
    supplier = V.to_sanitized_string(value.get("supplier"))
    invoice_number = V.to_sanitized_string(value.get("invoiceNumber"))
    invoice_date = V.to_date(value.get("invoiceDate"))
    total_ht = V.to_number(value.get("totalHT"))
    total_tva = V.to_number(value.get("totalTVA"))
    total_ttc = V.to_number(value.get("totalTTC"))
    scanned_at = V.to_date(value.get("scannedAt"))

    if not id_ or not supplier or not invoice_number or invoice_date is None or scanned_at is None:
        return None
    if total_ht is None or total_tva is None or total_ttc is None:
        return None

    items = parse_collection(_nested_list(value.get("items")), parse_invoice_item)
    if items is None:
        return None

    raw_ocr_text = value.get("ocrText")
    ocr_text = sanitize(raw_ocr_text) if isinstance(raw_ocr_text, str) else ""

    # Scanned page images never come in through a backup
    return Invoice(
        id=id_,
        supplier=supplier,
        invoice_number=invoice_number,
        invoice_date=invoice_date,
        total_ht=total_ht,
        total_tva=total_tva,
        total_ttc=total_ttc,
        scanned_at=scanned_at,
        items=items,
        ocr_text=ocr_text,
        tags=V.to_sanitized_string_list(value.get("tags")),
        images=[],
    )


def parse_price_point(value: Any) -> Optional[PricePoint]:
    if not V.is_mapping(value):
        return None
    date = V.to_date(value.get("date"))
    price = V.to_number(value.get("price"))
    if date is None or price is None:
        return None
    return PricePoint(date=date, price=price)


def parse_price_history(value: Any) -> Optional[PriceHistory]:
    if not V.is_mapping(value):
        return None

    id_ = V.to_sanitized_string(value.get("id"))
    item_name = V.to_sanitized_string(value.get("itemName"))
    supplier = V.to_sanitized_string(value.get("supplier"))
    average_price = V.to_number(value.get("averagePrice"))
    min_price = V.to_number(value.get("minPrice"))
    max_price = V.to_number(value.get("maxPrice"))

    if not id_ or not item_name or not supplier:
        return None
    if average_price is None or min_price is None or max_price is None:
        return None

    prices = parse_collection(_nested_list(value.get("prices")), parse_price_point)
    if prices is None:
        return None

    return PriceHistory(
        id=id_,
        item_name=item_name,
        supplier=supplier,
        average_price=average_price,
        min_price=min_price,
        max_price=max_price,
        prices=prices,
    )


def parse_settings(value: Any) -> Optional[AppSettings]:
    """
    Parse a settings row. ``geminiApiKey`` is never read: a restore must
    neither carry nor overwrite the stored credential.
    """
    if not V.is_mapping(value):
        return None

    id_ = V.to_sanitized_string(value.get("id"))
    establishment_name = V.to_sanitized_string(value.get("establishmentName"))
    dark_mode = V.to_boolean(value.get("darkMode"))
    onboarding_done = V.to_boolean(value.get("onboardingDone"))
    price_alert_threshold = V.to_number(value.get("priceAlertThreshold"))

    if not id_ or not establishment_name:
        return None
    if dark_mode is None or onboarding_done is None or price_alert_threshold is None:
        return None

    return AppSettings(
        id=id_,
        establishment_name=establishment_name,
        dark_mode=dark_mode,
        onboarding_done=onboarding_done,
        price_alert_threshold=price_alert_threshold,
    )


RECORD_PARSERS = {
    "equipment": parse_equipment,
    "temperatureRecords": parse_temperature_record,
    "oilChangeRecords": parse_oil_change_record,
    "tasks": parse_task,
    "productTraces": parse_product_trace,
    "invoices": parse_invoice,
    "priceHistory": parse_price_history,
    "settings": parse_settings,
}
