"""
Shared fixtures: a small but complete dataset covering every collection.
"""

from datetime import datetime, timezone

import pytest

from cuisine.models import (
    AppSettings,
    BackupPayload,
    Equipment,
    EquipmentType,
    IngredientUnit,
    Invoice,
    InvoiceItem,
    OilChangeAction,
    OilChangeRecord,
    PriceHistory,
    PricePoint,
    ProductTrace,
    RecurringType,
    Task,
    TaskCategory,
    TaskPriority,
    TemperatureRecord,
)
from cuisine.services.storage import JsonCollectionStore, PreferenceStore, SnapshotStore

NOW = datetime(2024, 3, 18, 9, 30, tzinfo=timezone.utc)


def make_collections():
    """Records for every collection, keyed by local store name."""
    return {
        "equipment": [
            Equipment(id="eq-1", name="Frigo cuisine", type=EquipmentType.FRIDGE,
                      min_temp=0, max_temp=4, order=0),
            Equipment(id="eq-2", name="Congélateur", type=EquipmentType.FREEZER,
                      min_temp=-25, max_temp=-18, order=1),
        ],
        "temperatureRecords": [
            TemperatureRecord(id="tr-1", equipment_id="eq-1", temperature=3.5,
                              timestamp=datetime(2024, 3, 17, 8, 0, tzinfo=timezone.utc),
                              is_compliant=True, signature="JD"),
            TemperatureRecord(id="tr-2", equipment_id="eq-2", temperature=-12.0,
                              timestamp=datetime(2024, 3, 17, 8, 5, tzinfo=timezone.utc),
                              is_compliant=False),
        ],
        "oilChangeRecords": [
            OilChangeRecord(id="oc-1", fryer_id="fryer-1",
                            changed_at=datetime(2024, 3, 15, 22, 0, tzinfo=timezone.utc),
                            action=OilChangeAction.CHANGED, operator="Marc"),
        ],
        "tasks": [
            Task(id="t-1", title="Éplucher les légumes", category=TaskCategory.MISE_EN_PLACE,
                 priority=TaskPriority.HIGH, completed=False, recurring=RecurringType.DAILY,
                 created_at=datetime(2024, 3, 10, tzinfo=timezone.utc), archived=False, order=0,
                 estimated_time=30, notes="Carottes et poireaux"),
            Task(id="t-2", title="Commander le poisson", category=TaskCategory.COMMANDES,
                 priority=TaskPriority.NORMAL, completed=True, recurring=None,
                 created_at=datetime(2024, 3, 11, tzinfo=timezone.utc), archived=True, order=1,
                 completed_at=datetime(2024, 3, 11, 15, 0, tzinfo=timezone.utc)),
        ],
        "productTraces": [
            ProductTrace(id="pt-1", product_name="Crème fraîche", supplier="Laiterie Dupont",
                         lot_number="L2403", reception_date=datetime(2024, 3, 12, tzinfo=timezone.utc),
                         expiration_date=datetime(2024, 3, 26, tzinfo=timezone.utc), category="Produits laitiers",
                         scanned_at=datetime(2024, 3, 12, 7, 45, tzinfo=timezone.utc), barcode="3017620422003",
                         allergens=["lait"], photo=b"\x89PNG\r\n\x1a\nlabel"),
        ],
        "invoices": [
            Invoice(id="inv-1", supplier="Metro", invoice_number="F-2024-031",
                    invoice_date=datetime(2024, 3, 1, tzinfo=timezone.utc),
                    total_ht=120.5, total_tva=6.63, total_ttc=127.13,
                    scanned_at=datetime(2024, 3, 2, 10, 0, tzinfo=timezone.utc),
                    items=[
                        InvoiceItem(designation="Beurre doux", quantity=4, unit_price_ht=8.5,
                                    total_price_ht=34, conditioning_quantity=1,
                                    conditioning_unit=IngredientUnit.KG),
                        InvoiceItem(designation="Farine T55", quantity=10, unit_price_ht=8.65,
                                    total_price_ht=86.5),
                    ],
                    ocr_text="METRO\nFacture F-2024-031", tags=["épicerie", "crèmerie"],
                    images=[b"page-1", b"page-2"]),
        ],
        "priceHistory": [
            PriceHistory(id="ph-1", item_name="Beurre doux", supplier="Metro",
                         average_price=8.25, min_price=8, max_price=8.5,
                         prices=[
                             PricePoint(date=datetime(2024, 2, 1, tzinfo=timezone.utc), price=8),
                             PricePoint(date=datetime(2024, 3, 1, tzinfo=timezone.utc), price=8.5),
                         ]),
        ],
        "settings": [
            AppSettings(id="default", establishment_name="Le Petit Bistrot", dark_mode=False,
                        onboarding_done=True, price_alert_threshold=10,
                        gemini_api_key="AIza-local-secret"),
        ],
    }


@pytest.fixture
def collections():
    return make_collections()


@pytest.fixture
def store(tmp_path, collections):
    """Collection store pre-filled with the sample dataset."""
    store = JsonCollectionStore(str(tmp_path / "data"))
    store.bulk_replace(collections)
    return store


@pytest.fixture
def empty_store(tmp_path):
    return JsonCollectionStore(str(tmp_path / "data"))


@pytest.fixture
def preferences(tmp_path):
    return PreferenceStore(str(tmp_path / "data"))


@pytest.fixture
def snapshots(tmp_path):
    return SnapshotStore(str(tmp_path / "data"))


@pytest.fixture
def empty_payload():
    return BackupPayload(version=1, exported_at=NOW)
