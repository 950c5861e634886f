"""
Receipt scanning backends.

A scanner turns an uploaded receipt image into a list of candidate items
(``{'name': ..., 'price': ..., 'quantity': ...}``). Candidates are not
trusted: they go through ``draft_editing.add_scanned_items`` which applies
the normal item validation.

The backend is chosen with the ``RECEIPT_SCANNER_BACKEND`` setting.
"""

import logging

import requests
from django.conf import settings
from django.utils.module_loading import import_string

from .exceptions import ReceiptScanError

logger = logging.getLogger(__name__)


class ReceiptScanner:
    """Base class for receipt scanner backends."""

    def scan(self, image) -> list:
        """Return candidate item dicts read from ``image``."""
        raise NotImplementedError


class RemoteReceiptScanner(ReceiptScanner):
    """
    Posts the image to an OCR service and reads back its items.

    The service receives a multipart upload in the ``image`` field and
    answers with JSON, either ``{"items": [...]}`` or a bare list.
    """

    def __init__(self, url=None, timeout=None):
        self.url = url if url is not None else getattr(settings, 'RECEIPT_SCANNER_URL', '')
        self.timeout = timeout or getattr(settings, 'RECEIPT_SCANNER_TIMEOUT', 30)

    def scan(self, image) -> list:
        if not self.url:
            raise ReceiptScanError("Receipt scanning is not configured", code='scanner_unavailable')

        filename = getattr(image, 'name', None) or 'receipt.jpg'
        content_type = getattr(image, 'content_type', None) or 'application/octet-stream'

        try:
            response = requests.post(
                self.url,
                files={'image': (filename, image.read(), content_type)},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            logger.error("Receipt scanner request failed: %s", e)
            raise ReceiptScanError("Receipt scanner is unavailable") from e
        except ValueError as e:
            logger.error("Receipt scanner returned invalid JSON: %s", e)
            raise ReceiptScanError("Receipt scanner returned an invalid response") from e

        items = payload.get('items') if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            raise ReceiptScanError("Receipt scanner returned an invalid response")

        return items


def get_receipt_scanner() -> ReceiptScanner:
    """Instantiate the scanner class named by ``RECEIPT_SCANNER_BACKEND``."""
    backend_path = getattr(
        settings,
        'RECEIPT_SCANNER_BACKEND',
        'apps.bills.services.receipt_scanning.RemoteReceiptScanner'
    )
    return import_string(backend_path)()
