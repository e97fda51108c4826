# contactbook/presentation.py
from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Union

from contactbook.client import ApiError, ContactBookClient
from contactbook.schemas import ContactOut
from contactbook.validation import clean_contact, validate_contact

logger = logging.getLogger(__name__)

SUCCESS_TTL_SECONDS = 3.0
CONFIRM_DELETE = "Are you sure you want to delete this contact?"
FETCH_FAILED = "Failed to fetch contacts. Please check if the server is running."


class ViewStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


def page_numbers(current: int, total: int, max_visible: int = 5) -> List[Union[int, str]]:
    """
    Pager strip. Up to ``max_visible`` pages are listed in full; beyond that
    the first, last and neighbours of ``current`` are kept with "..." gaps.

        >>> page_numbers(5, 10)
        [1, '...', 4, 5, 6, '...', 10]
    """
    if total <= max_visible:
        return list(range(1, total + 1))

    pages: List[Union[int, str]] = [1]
    if current > 3:
        pages.append("...")
    for p in range(max(2, current - 1), min(total - 1, current + 1) + 1):
        if p not in pages:
            pages.append(p)
    if current < total - 2:
        pages.append("...")
    if total not in pages:
        pages.append(total)
    return pages


class ContactBookView:
    """
    State behind the contact book page: the visible page of contacts, the
    pager counters and the error/success banners.

    Every action goes idle -> loading -> success|error and back to idle once
    the banner is dismissed or, for success, expires after three seconds.
    ``on_change`` is called after every state change so a renderer can redraw.
    """

    def __init__(
        self,
        client: ContactBookClient,
        page_size: int = 10,
        clock: Callable[[], float] = time.monotonic,
        on_change: Optional[Callable[["ContactBookView"], None]] = None,
    ):
        self.client = client
        self.page_size = page_size
        self.clock = clock
        self.on_change = on_change

        self.contacts: List[ContactOut] = []
        self.current_page = 1
        self.total_pages = 1
        self.total = 0
        self.loading = False
        self.error = ""
        self.field_errors: Dict[str, str] = {}
        self._success = ""
        self._success_at: Optional[float] = None

    # --- banners -------------------------------------------------------------

    @property
    def success(self) -> str:
        if self._success and self._success_at is not None:
            if self.clock() - self._success_at >= SUCCESS_TTL_SECONDS:
                self._success, self._success_at = "", None
        return self._success

    def _set_success(self, message: str) -> None:
        self._success = message
        self._success_at = self.clock()

    def clear_messages(self) -> None:
        self.error = ""
        self._success, self._success_at = "", None
        self._changed()

    @property
    def status(self) -> ViewStatus:
        if self.loading:
            return ViewStatus.LOADING
        if self.error:
            return ViewStatus.ERROR
        if self.success:
            return ViewStatus.SUCCESS
        return ViewStatus.IDLE

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    def _start(self, clear_success: bool = True) -> None:
        self.loading = True
        self.error = ""
        if clear_success:
            self._success, self._success_at = "", None
        self._changed()

    def _finish(self) -> None:
        self.loading = False
        self._changed()

    # --- actions -------------------------------------------------------------

    def load(self, page: int = 1) -> bool:
        self._start(clear_success=False)
        try:
            result = self.client.list_contacts(page, self.page_size)
        except Exception as e:
            logger.warning("Error fetching contacts: %r", e)
            self.error = FETCH_FAILED
            return False
        finally:
            self._finish()

        self.contacts = list(result.contacts)
        self.total_pages = result.total_pages
        self.current_page = result.current_page
        self.total = result.total
        self._changed()
        return True

    def change_page(self, page: int) -> bool:
        if 1 <= page <= self.total_pages and page != self.current_page:
            return self.load(page)
        return False

    def submit(self, form: Mapping[str, str]) -> bool:
        """
        Validate locally, then add. Field problems (ours or the server's) go
        to ``field_errors``; anything else to the error banner.
        """
        errors = validate_contact(form)
        if errors:
            self.field_errors = errors
            self._changed()
            return False
        self.field_errors = {}

        self._start()
        try:
            self.client.add_contact(**clean_contact(form))
        except ApiError as e:
            logger.warning("Error adding contact: %r", e)
            if e.details:
                self.field_errors = dict(e.details)
            else:
                self.error = e.message
            return False
        except Exception as e:
            logger.warning("Error adding contact: %r", e)
            self.error = str(e) or "Failed to add contact"
            return False
        finally:
            self._finish()

        self._set_success("Contact added successfully!")
        # new contacts sort first, so always go back to page 1
        self.load(1)
        return True

    def delete(self, contact_id: int, confirm: Callable[[str], bool]) -> bool:
        if not confirm(CONFIRM_DELETE):
            return False

        self._start()
        try:
            self.client.delete_contact(contact_id)
        except ApiError as e:
            logger.warning("Error deleting contact: %r", e)
            self.error = e.message
            return False
        except Exception as e:
            logger.warning("Error deleting contact: %r", e)
            self.error = str(e) or "Failed to delete contact"
            return False
        finally:
            self._finish()

        self._set_success("Contact deleted successfully!")
        if len(self.contacts) == 1 and self.current_page > 1:
            self.load(self.current_page - 1)
        else:
            self.load(self.current_page)
        return True
