# contactbook/routes_contacts.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Path, Query, Request, Response, status

from contactbook.database import SQLITE_MAX_INT
from contactbook.errors import BadRequest, NotFound, ValidationError
from contactbook.schemas import ContactCreate, ContactOut, ContactPage
from contactbook.store import ContactStore
from contactbook.validation import clean_contact, validate_contact

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> ContactStore:
    """The store built in create_app(); routes never import one globally."""
    return request.app.state.store


def max_page_size(request: Request) -> int:
    return request.app.state.settings.MAX_PAGE_SIZE


# --- Routes ------------------------------------------------------------------


@router.get("/contacts", response_model=ContactPage)
def contacts_list(
    page: int = Query(1, ge=1, le=SQLITE_MAX_INT),
    limit: int = Query(10, ge=1),
    limit_cap: int = Depends(max_page_size),
    store: ContactStore = Depends(get_store),
):
    """
    One page of contacts, newest first.
    """
    if limit > limit_cap:
        raise BadRequest("Invalid pagination parameters")
    return store.list_contacts(page, limit)


@router.post("/contacts", response_model=ContactOut, status_code=status.HTTP_201_CREATED)
def contacts_create(payload: ContactCreate, store: ContactStore = Depends(get_store)):
    data = payload.model_dump()
    errors = validate_contact(data)
    if errors:
        raise ValidationError(errors)

    contact = store.add_contact(**clean_contact(data))
    logger.info("Added contact id=%s", contact.id)
    return contact


@router.delete("/contacts/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
def contacts_delete(contact_id: int = Path(..., ge=1, le=SQLITE_MAX_INT), store: ContactStore = Depends(get_store)):
    if store.delete_contact(contact_id) == 0:
        raise NotFound()
    logger.info("Deleted contact id=%s", contact_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
