# contactbook/client.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from contactbook.config import settings
from contactbook.schemas import ContactOut, ContactPage

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A non-2xx answer from the contacts API."""

    def __init__(self, status_code: int, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details or {}


class ContactBookClient:
    """
    Thin HTTP client for the contacts API.

    ``session`` may be anything with requests.Session's get/post/delete
    signatures (FastAPI's TestClient qualifies); a fresh requests.Session is
    used when none is given. ``base_url`` defaults to settings.API_BASE_URL;
    pass "" to send relative paths through a TestClient.
    """

    def __init__(self, base_url: Optional[str] = None, session: Any = None, timeout: float = 15):
        if base_url is None:
            base_url = settings.API_BASE_URL
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _raise_for_status(resp, fallback: str) -> None:
        if 200 <= resp.status_code < 300:
            return
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        details = data.get("details")
        raise ApiError(
            resp.status_code,
            data.get("error") or fallback,
            details if isinstance(details, dict) else None,
        )

    def list_contacts(self, page: int = 1, limit: int = 10) -> ContactPage:
        resp = self.session.get(
            self._url("/contacts"), params={"page": page, "limit": limit}, timeout=self.timeout
        )
        self._raise_for_status(resp, f"HTTP error! status: {resp.status_code}")
        return ContactPage.model_validate(resp.json())

    def add_contact(self, name: str, email: str, phone: str) -> ContactOut:
        resp = self.session.post(
            self._url("/contacts"),
            json={"name": name, "email": email, "phone": phone},
            timeout=self.timeout,
        )
        self._raise_for_status(resp, "Failed to add contact")
        return ContactOut.model_validate(resp.json())

    def delete_contact(self, contact_id: int) -> None:
        resp = self.session.delete(self._url(f"/contacts/{contact_id}"), timeout=self.timeout)
        self._raise_for_status(resp, "Failed to delete contact")

    def health(self) -> Dict[str, Any]:
        resp = self.session.get(self._url("/health"), timeout=self.timeout)
        self._raise_for_status(resp, "Health check failed")
        return resp.json()
