"""
Free-text sanitization shared by every user-input boundary (forms, OCR
results, barcode scans and backup imports).
"""

import logging
import re

logger = logging.getLogger(__name__)

MOJIBAKE_MARKERS = re.compile(r"[ÃÂâ]")

# Encodings a UTF-8 string is typically mis-decoded through
_MOJIBAKE_SOURCE_ENCODINGS = ("cp1252", "latin-1")

_SCRIPT_OR_STYLE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_HTML_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_HTML_TAG = re.compile(r"<[^>]*>")


def mojibake_score(value: str) -> int:
    """Count characters that typically show up in UTF-8 read as latin-1."""
    return len(MOJIBAKE_MARKERS.findall(value))


def _repair_once(text: str) -> str:
    original_score = mojibake_score(text)
    for encoding in _MOJIBAKE_SOURCE_ENCODINGS:
        try:
            candidate = text.encode(encoding).decode("utf-8")
        except (UnicodeEncodeError, UnicodeDecodeError):
            continue
        if "\ufffd" in candidate:
            continue
        if mojibake_score(candidate) < original_score:
            logger.debug("Repaired mojibake via %s", encoding)
            return candidate
    return text


def repair_mojibake(text: str) -> str:
    """
    Repair UTF-8 text that was decoded with a single-byte charset,
    e.g. "RÃ©ponse" -> "Réponse". Text garbled more than once is unwound
    one layer at a time.

    A layer is only undone when it decodes cleanly and carries strictly
    fewer mojibake markers than before; otherwise the text is returned as
    it stands.
    """
    if not text:
        return text

    while MOJIBAKE_MARKERS.search(text):
        repaired = _repair_once(text)
        if repaired == text:
            break
        text = repaired
    return text


def strip_markup(text: str) -> str:
    """Remove HTML/XML markup, including script and style bodies."""
    stripped = _SCRIPT_OR_STYLE.sub("", text)
    stripped = _HTML_COMMENT.sub("", stripped)
    return _HTML_TAG.sub("", stripped)


def strip_control_characters(text: str) -> str:
    # Keep tab, newline and carriage return
    return "".join(
        char for char in text
        if char in "\t\n\r" or (ord(char) >= 32 and ord(char) != 127)
    )


def sanitize(text: str) -> str:
    """
    Sanitize a free-text value: repair mojibake, strip markup, drop control
    characters. Does not trim; callers decide whether blank is acceptable.

    Stripping can bring garbled bytes next to each other ("Ã<b></b>©"), so
    the steps repeat until nothing changes. A pass that changes the text
    always shortens it.
    """
    if not isinstance(text, str):
        return ""

    while True:
        cleaned = strip_control_characters(strip_markup(repair_mojibake(text)))
        if cleaned == text:
            return cleaned
        text = cleaned
