# contactbook/store.py
from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from contactbook.database import (
    MEMORY_PATH,
    SQLITE_MAX_INT,
    Base,
    file_engine,
    memory_engine,
    session_factory,
)
from contactbook.errors import BadRequest, DuplicateEmail, StorageFault
from contactbook.models import Contact
from contactbook.schemas import ContactOut, ContactPage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreConfig:
    path: str = "contact.db.sqlite3"
    fallback_to_memory: bool = True

    @classmethod
    def from_settings(cls, settings) -> "StoreConfig":
        return cls(path=settings.DB_PATH, fallback_to_memory=settings.DB_FALLBACK_TO_MEMORY)


class ContactStore:
    """
    Owns the ``contacts`` table. Built once at startup and handed to the
    API layer; every public method opens its own session and either
    returns or raises exactly once.
    """

    def __init__(self, config: StoreConfig):
        self.config = config
        self.engine: Optional[Engine] = None
        self._sessions: Optional[sessionmaker] = None

    # --- lifecycle -----------------------------------------------------------

    @property
    def persistent(self) -> bool:
        return self.engine is not None and self.engine.url.database not in (None, "", MEMORY_PATH)

    def initialize(self) -> None:
        """Open the database (once) and create the table if it is missing."""
        if self.engine is None:
            self.engine = self._open()
            self._sessions = session_factory(self.engine)
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            logger.error("Failed to create contacts table: %s", e)
            raise StorageFault(e) from e
        logger.info("DB schema ready (%s)", self.config.path if self.persistent else "in-memory")

    def _open(self) -> Engine:
        if self.config.path == MEMORY_PATH:
            return memory_engine()
        engine: Optional[Engine] = None
        try:
            engine = file_engine(self.config.path)
            with engine.connect() as conn:
                conn.exec_driver_sql("SELECT 1")
            logger.info("Opened SQLite database at %s", self.config.path)
            return engine
        except (OSError, SQLAlchemyError) as e:
            logger.error("Failed to open SQLite DB at %s: %s", self.config.path, e)
            if engine is not None:
                engine.dispose()
            if not self.config.fallback_to_memory:
                raise StorageFault(e) from e
        logger.error("Falling back to in-memory SQLite instance (data will not persist).")
        return memory_engine()

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self._sessions is None:
            raise StorageFault(RuntimeError("ContactStore.initialize() was not called"))
        db = self._sessions()
        try:
            yield db
        finally:
            db.close()

    # --- operations ----------------------------------------------------------

    def list_contacts(self, page: int = 1, page_size: int = 10) -> ContactPage:
        if page < 1 or page_size < 1:
            raise BadRequest("Invalid pagination parameters")

        offset = (page - 1) * page_size
        with self._session() as db:
            try:
                total = db.execute(select(func.count()).select_from(Contact)).scalar_one()
                rows = []
                # no table can hold that many rows, and sqlite cannot bind the offset
                if offset <= SQLITE_MAX_INT:
                    rows = db.execute(
                        select(Contact)
                        .order_by(Contact.created_at.desc(), Contact.id.desc())
                        .offset(offset)
                        .limit(min(page_size, SQLITE_MAX_INT))
                    ).scalars().all()
            except SQLAlchemyError as e:
                raise StorageFault(e) from e

        return ContactPage(
            contacts=[ContactOut.model_validate(r) for r in rows],
            total=total,
            total_pages=math.ceil(total / page_size),
            current_page=page,
        )

    def add_contact(self, name: str, email: str, phone: str) -> ContactOut:
        """Insert, then read the row back by its new id."""
        with self._session() as db:
            try:
                obj = Contact(name=name, email=email, phone=phone)
                db.add(obj)
                db.commit()
                contact_id = obj.id
                db.expunge_all()
                stored = db.get(Contact, contact_id)
            except IntegrityError as e:
                db.rollback()
                if "UNIQUE" in str(e.orig):
                    raise DuplicateEmail() from e
                raise StorageFault(e) from e
            except SQLAlchemyError as e:
                db.rollback()
                raise StorageFault(e) from e

        if stored is None:
            raise StorageFault(LookupError(f"contact {contact_id} vanished after insert"))
        return ContactOut.model_validate(stored)

    def delete_contact(self, contact_id: int) -> int:
        """Hard delete. Returns the number of rows removed (0 or 1)."""
        if not 1 <= contact_id <= SQLITE_MAX_INT:
            return 0
        with self._session() as db:
            try:
                result = db.execute(delete(Contact).where(Contact.id == contact_id))
                deleted = result.rowcount
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise StorageFault(e) from e
        return deleted
