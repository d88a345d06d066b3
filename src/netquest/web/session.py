from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from netquest.domain.errors import CatalogError
from netquest.rules.catalog import RuleCatalog
from netquest.rules.content import Content
from netquest.sim.store import SessionStore

logger = logging.getLogger(__name__)

_DATA_DIR: Path | None = None
_shared: tuple[RuleCatalog, Content] | None = None


@dataclass
class WebSession:
    store: SessionStore
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def reset(self) -> None:
        self.store.reset_game()


_sessions: dict[str, WebSession] = {}


def configure(data_dir: Path | None) -> None:
    """Point new sessions at another content directory (tests, modding)."""
    global _DATA_DIR, _shared
    _DATA_DIR = data_dir
    _shared = None


def _load_content() -> tuple[RuleCatalog, Content]:
    global _shared
    if _shared is None:
        try:
            _shared = (RuleCatalog.load(_DATA_DIR), Content.load(_DATA_DIR))
        except CatalogError:
            logger.exception("Failed to load mission content from %s", _DATA_DIR or "package data")
            raise
    return _shared


def new_store() -> SessionStore:
    catalog, content = _load_content()
    return SessionStore(catalog, content)


def get_or_create_session(session_id: str | None) -> tuple[str, WebSession]:
    if session_id and session_id in _sessions:
        return session_id, _sessions[session_id]

    new_id = str(uuid.uuid4())
    session = WebSession(store=new_store())
    _sessions[new_id] = session
    return new_id, session


def get_session(session_id: str) -> WebSession | None:
    return _sessions.get(session_id)


def preload() -> None:
    """Parse the shipped content once so a broken file fails at startup."""
    _load_content()
