from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional


@dataclass
class ProductTrace:
    """
    Traceability entry for a received product (lot, supplier, dates).

    ``photo`` holds the raw label picture and only lives in the local store.
    """
    id: str
    product_name: str
    supplier: str
    lot_number: str
    reception_date: datetime
    expiration_date: datetime
    category: str
    scanned_at: datetime
    barcode: Optional[str] = None
    photo_url: Optional[str] = None
    allergens: List[str] = field(default_factory=list)
    photo: Optional[bytes] = None

    def without_photo(self) -> "ProductTrace":
        """Return a copy with the binary photo dropped."""
        return replace(self, photo=None, allergens=list(self.allergens))
