# subslayer/utils/file_intake.py
"""
Subscription pre-fill from an uploaded file.

This is a lookup table, not document analysis: images are matched on their
file name against a fixed list of known services, and PDF / text uploads get
a fixed placeholder per file kind. File contents are never read.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional, Tuple

from subslayer.utils.spending import add_one_month

MAX_FILE_SIZE = 10 * 1024 * 1024

IMAGE_TYPES = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
)
PDF_TYPE = "application/pdf"
TEXT_TYPE = "text/plain"
ALLOWED_TYPES = IMAGE_TYPES + (PDF_TYPE, TEXT_TYPE)


class FileIntakeError(ValueError):
    """The upload was rejected; the message is safe to show to the user"""


@dataclass(frozen=True)
class KnownService:
    keywords: Tuple[str, ...]
    name: str
    cost: float
    billing_cycle: str
    category: str
    currency: str = "USD"


# Order matters: the first service with a matching keyword wins.
KNOWN_SERVICES: Tuple[KnownService, ...] = (
    KnownService(("netflix",), "Netflix", 15.99, "monthly", "Entertainment"),
    KnownService(("spotify",), "Spotify", 9.99, "monthly", "Music"),
    KnownService(("disney",), "Disney+", 7.99, "monthly", "Entertainment"),
    KnownService(("hulu",), "Hulu", 7.99, "monthly", "Entertainment"),
    KnownService(("hbo",), "HBO Max", 15.99, "monthly", "Entertainment"),
    KnownService(("amazon", "prime video", "prime"), "Amazon Prime", 139.00, "annual", "Shopping"),
    KnownService(("youtube",), "YouTube Premium", 13.99, "monthly", "Entertainment"),
    KnownService(("apple music", "applemusic"), "Apple Music", 10.99, "monthly", "Music"),
    KnownService(("adobe", "creative cloud"), "Adobe Creative Cloud", 54.99, "monthly", "Design"),
    KnownService(("microsoft", "office 365", "office365", "m365"), "Microsoft 365", 99.99, "annual", "Productivity"),
    KnownService(("dropbox",), "Dropbox", 11.99, "monthly", "Productivity"),
    KnownService(("notion",), "Notion", 10.00, "monthly", "Productivity"),
)

_PLACEHOLDERS: Dict[str, Dict[str, object]] = {
    "image": {
        "name": "New Subscription",
        "cost": 9.99,
        "category": "Other",
        "description": "Subscription detected from image - please review the details",
    },
    "pdf": {
        "name": "Document Subscription",
        "cost": 19.99,
        "category": "Other",
        "description": "Subscription imported from PDF document - please review the details",
    },
    "text": {
        "name": "Text Import",
        "cost": 4.99,
        "category": "Other",
        "description": "Subscription imported from text file - please review the details",
    },
}

_SEPARATORS = re.compile(r"[-_.\s]+")


def validate_upload(content_type: Optional[str], size: int) -> str:
    """Return the normalised content type or raise FileIntakeError"""
    normalised = (content_type or "").split(";")[0].strip().lower()
    if normalised not in ALLOWED_TYPES:
        raise FileIntakeError("Please upload an image file (JPG, PNG, GIF, WebP) or document (PDF, TXT)")
    if size > MAX_FILE_SIZE:
        raise FileIntakeError("File size must be less than 10MB")
    return normalised


def normalise_filename(filename: str) -> str:
    """Strip directory and extension, lower-case, collapse separators to spaces"""
    stem, _ = os.path.splitext(os.path.basename(filename or ""))
    return _SEPARATORS.sub(" ", stem.lower()).strip()


def match_service(filename: str) -> Optional[KnownService]:
    stem = normalise_filename(filename)
    if not stem:
        return None
    for service in KNOWN_SERVICES:
        if any(keyword in stem for keyword in service.keywords):
            return service
    return None


def _placeholder(kind: str, next_billing: date) -> Dict[str, object]:
    record = dict(_PLACEHOLDERS[kind])
    record.update({
        "currency": "USD",
        "billing_cycle": "monthly",
        "next_billing": next_billing,
        "matched": False,
    })
    return record


def analyze_upload(
    filename: str,
    content_type: Optional[str],
    size: int,
    today: Optional[date] = None,
) -> Dict[str, object]:
    """
    Build a subscription form pre-fill for an upload.

    Raises FileIntakeError for a disallowed type or an oversized file.
    """
    kind_type = validate_upload(content_type, size)
    next_billing = add_one_month(today or date.today())

    if kind_type == PDF_TYPE:
        return _placeholder("pdf", next_billing)
    if kind_type == TEXT_TYPE:
        return _placeholder("text", next_billing)

    service = match_service(filename)
    if service is None:
        return _placeholder("image", next_billing)

    return {
        "name": service.name,
        "cost": service.cost,
        "currency": service.currency,
        "billing_cycle": service.billing_cycle,
        "category": service.category,
        "description": f"{service.name} subscription - {service.billing_cycle} billing",
        "next_billing": next_billing,
        "matched": True,
    }
