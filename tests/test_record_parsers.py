"""
Unit tests for record parsers.
"""

from datetime import datetime, timezone

import pytest

from cuisine.models import (
    EquipmentType,
    IngredientUnit,
    OilChangeAction,
    RecurringType,
    TaskCategory,
    TaskPriority,
)
from cuisine.services.backup.record_parsers import (
    RECORD_PARSERS,
    parse_collection,
    parse_equipment,
    parse_invoice,
    parse_invoice_item,
    parse_oil_change_record,
    parse_price_history,
    parse_product_trace,
    parse_settings,
    parse_task,
    parse_temperature_record,
)


def equipment_row(**overrides):
    row = {"id": "eq-1", "name": "Frigo", "type": "fridge", "minTemp": 0, "maxTemp": 4, "order": 0}
    row.update(overrides)
    return row


def task_row(**overrides):
    row = {
        "id": "t-1",
        "title": "Nettoyer la hotte",
        "category": "nettoyage",
        "priority": "low",
        "completed": False,
        "recurring": "weekly",
        "createdAt": "2024-03-10T00:00:00.000Z",
        "archived": False,
        "order": 2,
    }
    row.update(overrides)
    return row


def invoice_row(**overrides):
    row = {
        "id": "inv-1",
        "supplier": "Metro",
        "invoiceNumber": "F-1",
        "invoiceDate": "2024-03-01T00:00:00Z",
        "items": [
            {"designation": "Beurre", "quantity": 2, "unitPriceHT": 8.5, "totalPriceHT": 17},
        ],
        "totalHT": 17,
        "totalTVA": 0.94,
        "totalTTC": 17.94,
        "ocrText": "METRO",
        "tags": ["crèmerie"],
        "scannedAt": "2024-03-02T10:00:00Z",
    }
    row.update(overrides)
    return row


class TestParseCollection:
    """Test cases for the collection traverse."""

    def test_missing_reads_as_empty(self):
        """Test an absent collection reads as empty."""
        assert parse_collection(None, parse_equipment) == []

    @pytest.mark.parametrize("value", ["equipment", 3, {"0": {}}])
    def test_non_list_rejects(self, value):
        """Test a collection that is not a list rejects."""
        assert parse_collection(value, parse_equipment) is None

    def test_one_bad_element_rejects_all(self):
        """Test one element that rejects rejects the whole list."""
        rows = [equipment_row(), equipment_row(id="eq-2", type="walk_in")]
        assert parse_collection(rows, parse_equipment) is None

    def test_short_circuits(self):
        """Test parsing stops at the first element that rejects."""
        calls = []

        def parser(value):
            calls.append(value)
            return None if value == 2 else value

        assert parse_collection([1, 2, 3], parser) is None
        assert calls == [1, 2]

    def test_preserves_order(self):
        """Test element order is kept."""
        rows = [equipment_row(id="b"), equipment_row(id="a")]
        assert [e.id for e in parse_collection(rows, parse_equipment)] == ["b", "a"]


class TestParseEquipment:
    """Test cases for equipment rows."""

    def test_valid(self):
        """Test numeric strings and fractional orders are coerced."""
        equipment = parse_equipment(equipment_row(type="cold_room", minTemp="-2", order=1.5))
        assert equipment.type is EquipmentType.COLD_ROOM
        assert equipment.min_temp == -2.0
        assert equipment.order == 2

    @pytest.mark.parametrize("field,value", [
        ("id", ""),
        ("name", None),
        ("type", "wine_cellar"),
        ("minTemp", "cold"),
        ("maxTemp", float("inf")),
        ("order", True),
        ("id", 42),
        ("order", 10 ** 400),
    ])
    def test_invalid_required_field(self, field, value):
        """Test each refused required field rejects the row."""
        assert parse_equipment(equipment_row(**{field: value})) is None

    @pytest.mark.parametrize("value", [None, "eq-1", [], 3])
    def test_non_mapping(self, value):
        """Test non-objects reject."""
        assert parse_equipment(value) is None


class TestParseTemperatureRecord:
    """Test cases for temperature readings."""

    def test_optional_signature(self):
        """Test a refused optional signature is left out."""
        row = {"id": "tr-1", "equipmentId": "eq-9", "temperature": 3,
               "timestamp": 1710662400000, "isCompliant": True, "signature": 12}
        record = parse_temperature_record(row)
        assert record.equipment_id == "eq-9"
        assert record.signature is None
        assert record.timestamp == datetime(2024, 3, 17, 8, 0, tzinfo=timezone.utc)

    def test_compliance_must_be_boolean(self):
        """Test compliance only accepts a literal boolean."""
        row = {"id": "tr-1", "equipmentId": "eq-1", "temperature": 3,
               "timestamp": "2024-03-17T08:00:00Z", "isCompliant": "yes"}
        assert parse_temperature_record(row) is None


class TestParseOilChangeRecord:
    """Test cases for oil change rows."""

    def test_valid(self):
        """Test a valid oil change without operator."""
        record = parse_oil_change_record({
            "id": "oc-1", "fryerId": "f-1", "changedAt": "2024-03-15T22:00:00Z", "action": "changed",
        })
        assert record.action is OilChangeAction.CHANGED
        assert record.operator is None

    def test_unknown_action(self):
        """Test an unknown action tag rejects."""
        assert parse_oil_change_record({
            "id": "oc-1", "fryerId": "f-1", "changedAt": "2024-03-15T22:00:00Z", "action": "filtered",
        }) is None


class TestParseTask:
    """Test cases for tasks."""

    def test_valid(self):
        """Test a valid task with optional fields."""
        task = parse_task(task_row(estimatedTime="15", notes="  <b>hotte</b>  "))
        assert task.category is TaskCategory.NETTOYAGE
        assert task.priority is TaskPriority.LOW
        assert task.recurring is RecurringType.WEEKLY
        assert task.estimated_time == 15.0
        assert task.notes == "hotte"
        assert task.completed_at is None

    def test_explicit_null_recurring(self):
        """Test an explicit null recurring is a one-off task."""
        assert parse_task(task_row(recurring=None)).recurring is None

    def test_missing_recurring_key_rejects(self):
        """Test an absent recurring key rejects."""
        row = task_row()
        del row["recurring"]
        assert parse_task(row) is None

    def test_unknown_recurring_rejects(self):
        """Test an unknown recurring tag rejects."""
        assert parse_task(task_row(recurring="monthly")) is None

    def test_bad_optional_fields_omitted(self):
        """Test refused optional fields are left out."""
        task = parse_task(task_row(completedAt="not a date", estimatedTime="soon", notes=[]))
        assert task is not None
        assert task.completed_at is None
        assert task.estimated_time is None
        assert task.notes is None

    @pytest.mark.parametrize("field,value", [
        ("category", "boissons"),
        ("priority", "urgent"),
        ("completed", 0),
        ("archived", None),
        ("createdAt", "later"),
        ("title", "<p></p>"),
        ("id", None),
        ("order", "first"),
        ("recurring", 1),
    ])
    def test_invalid_required_field(self, field, value):
        """Test each refused required field rejects the task."""
        assert parse_task(task_row(**{field: value})) is None


class TestParseProductTrace:
    """Test cases for product traceability rows."""

    def row(self, **overrides):
        row = {
            "id": "pt-1",
            "productName": "Crème",
            "supplier": "Laiterie",
            "lotNumber": "L1",
            "receptionDate": "2024-03-12",
            "expirationDate": "2024-03-26",
            "category": "Laitiers",
            "scannedAt": "2024-03-12T07:45:00Z",
            "allergens": ["lait", "lait", 3],
            "photo": "aGVsbG8=",
        }
        row.update(overrides)
        return row

    def test_photo_never_imported(self):
        """Test photos never come in through a backup."""
        trace = parse_product_trace(self.row())
        assert trace.photo is None
        assert trace.allergens == ["lait"]
        assert trace.barcode is None

    def test_missing_lot_number(self):
        """Test a missing lot number rejects."""
        assert parse_product_trace(self.row(lotNumber=None)) is None


class TestParseInvoice:
    """Test cases for invoices and their items."""

    def test_valid(self):
        """Test images never come in through a backup."""
        invoice = parse_invoice(invoice_row(images=["aGVsbG8="]))
        assert invoice.images == []
        assert invoice.items[0].designation == "Beurre"
        assert invoice.tags == ["crèmerie"]
        assert invoice.ocr_text == "METRO"

    def test_ocr_text_defaults_to_empty(self):
        """Test a missing OCR text reads as empty."""
        assert parse_invoice(invoice_row(ocrText=None)).ocr_text == ""

    def test_missing_items_read_as_empty(self):
        """Test missing items read as an empty list."""
        row = invoice_row()
        del row["items"]
        assert parse_invoice(row).items == []

    def test_one_bad_item_rejects_invoice(self):
        """Test one bad item rejects the invoice."""
        items = [
            {"designation": "Beurre", "quantity": 2, "unitPriceHT": 8.5, "totalPriceHT": 17},
            {"designation": "Farine", "quantity": "beaucoup", "unitPriceHT": 1, "totalPriceHT": 1},
        ]
        assert parse_invoice(invoice_row(items=items)) is None

    def test_item_conditioning(self):
        """Test the conditioning unit is kept only when known."""
        item = parse_invoice_item({
            "designation": "Lait", "quantity": 6, "unitPriceHT": 0.9, "totalPriceHT": 5.4,
            "conditioningQuantity": 1, "conditioningUnit": "l",
        })
        assert item.conditioning_quantity == 1
        assert item.conditioning_unit is IngredientUnit.L

        item = parse_invoice_item({
            "designation": "Lait", "quantity": 6, "unitPriceHT": 0.9, "totalPriceHT": 5.4,
            "conditioningUnit": "litre",
        })
        assert item.conditioning_unit is None


class TestParsePriceHistory:
    """Test cases for price history."""

    def test_bad_price_point_rejects(self):
        """Test one bad price point rejects the history."""
        row = {
            "id": "ph-1", "itemName": "Beurre", "supplier": "Metro",
            "averagePrice": 8, "minPrice": 8, "maxPrice": 8,
            "prices": [{"date": "2024-03-01", "price": 8}, {"date": "2024-03-02"}],
        }
        assert parse_price_history(row) is None

        row["prices"] = [{"date": "2024-03-01", "price": 8}]
        assert len(parse_price_history(row).prices) == 1


class TestParseSettings:
    """Test cases for settings rows."""

    def test_api_key_never_read(self):
        """Test the API key is never read from a backup."""
        settings = parse_settings({
            "id": "default", "establishmentName": "Bistrot", "darkMode": True,
            "onboardingDone": False, "priceAlertThreshold": 5, "geminiApiKey": "AIza-imported",
        })
        assert settings.gemini_api_key is None
        assert settings.dark_mode is True

    def test_registry_covers_every_collection(self):
        """Test every collection has a parser."""
        assert set(RECORD_PARSERS) == {
            "equipment", "temperatureRecords", "oilChangeRecords", "tasks",
            "productTraces", "invoices", "priceHistory", "settings",
        }
