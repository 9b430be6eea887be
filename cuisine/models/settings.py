from dataclasses import dataclass, replace
from typing import Optional


@dataclass
class AppSettings:
    """
    Establishment-level settings. ``gemini_api_key`` is the OCR credential and
    never leaves the device through a backup.
    """
    id: str
    establishment_name: str
    dark_mode: bool
    onboarding_done: bool
    price_alert_threshold: float
    gemini_api_key: Optional[str] = None

    def without_secrets(self) -> "AppSettings":
        """Return a copy with the stored API key removed."""
        return replace(self, gemini_api_key=None)

    def has_api_key(self) -> bool:
        return bool(self.gemini_api_key)
