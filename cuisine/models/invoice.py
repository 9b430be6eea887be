from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import List, Optional


class IngredientUnit(Enum):
    KG = "kg"
    G = "g"
    L = "l"
    ML = "ml"
    UNITE = "unite"


@dataclass
class InvoiceItem:
    designation: str
    quantity: float
    unit_price_ht: float
    total_price_ht: float
    conditioning_quantity: Optional[float] = None
    conditioning_unit: Optional[IngredientUnit] = None


@dataclass
class Invoice:
    """
    Supplier invoice with its line items.

    ``images`` holds the scanned pages and only lives in the local store.
    """
    id: str
    supplier: str
    invoice_number: str
    invoice_date: datetime
    total_ht: float
    total_tva: float
    total_ttc: float
    scanned_at: datetime
    items: List[InvoiceItem] = field(default_factory=list)
    ocr_text: str = ""
    tags: List[str] = field(default_factory=list)
    images: List[bytes] = field(default_factory=list)

    def without_images(self) -> "Invoice":
        """Return a copy with the scanned page images dropped."""
        return replace(
            self,
            images=[],
            items=[replace(item) for item in self.items],
            tags=list(self.tags),
        )


@dataclass
class PricePoint:
    date: datetime
    price: float


@dataclass
class PriceHistory:
    id: str
    item_name: str
    supplier: str
    average_price: float
    min_price: float
    max_price: float
    prices: List[PricePoint] = field(default_factory=list)
