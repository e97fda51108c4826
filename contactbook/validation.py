# contactbook/validation.py
from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")
PHONE_RE = re.compile(r"^[0-9]{10}$")


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def normalize_phone(raw: Optional[str]) -> str:
    """Keep only the digits: '(555) 123-4567' -> '5551234567'."""
    return re.sub(r"[^0-9]", "", _text(raw))


def validate_contact(data: Mapping[str, Any]) -> Dict[str, str]:
    """
    Return {field: message} for every field that fails; {} means valid.
    Used by the API before touching the store and by the view before
    submitting, so both sides report the same messages.
    """
    errors: Dict[str, str] = {}

    name = _text(data.get("name")).strip()
    if not name:
        errors["name"] = "Name is required"

    email = _text(data.get("email")).strip()
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_RE.match(email):
        errors["email"] = "Valid email is required"

    phone = _text(data.get("phone")).strip()
    if not phone:
        errors["phone"] = "Phone is required"
    elif not PHONE_RE.match(normalize_phone(phone)):
        errors["phone"] = "Phone must be exactly 10 digits"

    return errors


def clean_contact(data: Mapping[str, Any]) -> Dict[str, str]:
    """Values as they get stored: trimmed name/email, digits-only phone."""
    return {
        "name": _text(data.get("name")).strip(),
        "email": _text(data.get("email")).strip(),
        "phone": normalize_phone(data.get("phone")),
    }
