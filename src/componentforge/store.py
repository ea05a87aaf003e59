"""Concrete implementations for component persistence."""

import logging
import re
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import StaleWrite, ValidationError
from .models import Component, utcnow

logger = logging.getLogger(__name__)


class Store(ABC):
    """Interface for saving and loading components.

    Implementations must serialize writes to one component: ``save_component``
    only succeeds when the caller's ``revision`` matches the stored record.
    """

    @abstractmethod
    def load_component(self, user_id: str, component_id: str) -> Optional[Component]:
        """Loads a single component owned by ``user_id``."""
        pass

    @abstractmethod
    def save_component(self, user_id: str, component: Component) -> Component:
        """Saves a component and returns the stored copy.

        Raises
        ------
        StaleWrite
            If the component was modified since it was loaded.
        """
        pass

    @abstractmethod
    def delete_component(self, user_id: str, component_id: str) -> bool:
        """Deletes a component with its whole history. True if it existed."""
        pass

    @abstractmethod
    def list_components(self, user_id: str) -> List[str]:
        """Lists the user's component IDs, most recently updated first."""
        pass

    @abstractmethod
    def get_next_component_id(self, user_id: str) -> str:
        """Generates a new, unique component ID for a user."""
        pass

    def count_components(self, user_id: str) -> int:
        return len(self.list_components(user_id))


def _check_revision(stored: Optional[Component], component: Component) -> None:
    expected = stored.revision if stored is not None else 0
    if component.revision != expected:
        raise StaleWrite(
            f"Component {component.id!r} is at revision {expected}, "
            f"save was based on revision {component.revision}"
        )


def _stamp(component: Component) -> Component:
    saved = component.model_copy(deep=True)
    saved.revision += 1
    saved.updated_at = utcnow()
    return saved


class InMemory(Store):
    """Keeps components in a dictionary. Loads and saves hand out copies."""

    def __init__(self):
        self._store: Dict[Tuple[str, str], Component] = {}
        self._lock = threading.Lock()

    def load_component(self, user_id: str, component_id: str) -> Optional[Component]:
        component = self._store.get((user_id, component_id))
        return component.model_copy(deep=True) if component else None

    def save_component(self, user_id: str, component: Component) -> Component:
        with self._lock:
            key = (user_id, component.id)
            _check_revision(self._store.get(key), component)
            saved = _stamp(component)
            self._store[key] = saved
        return saved.model_copy(deep=True)

    def delete_component(self, user_id: str, component_id: str) -> bool:
        with self._lock:
            return self._store.pop((user_id, component_id), None) is not None

    def list_components(self, user_id: str) -> List[str]:
        with self._lock:
            owned = [c for (uid, _), c in self._store.items() if uid == user_id]
        owned.sort(key=lambda c: c.updated_at, reverse=True)
        return [c.id for c in owned]

    def get_next_component_id(self, user_id: str) -> str:
        with self._lock:
            ids = [
                int(cid) for (uid, cid) in self._store if uid == user_id and cid.isdigit()
            ]
        return f"{max(ids, default=0) + 1:03d}"


# Ids become path segments in the File store.
SAFE_ID = re.compile(r"^[A-Za-z0-9_-]+\Z")


def _safe_id(value: str, kind: str) -> str:
    if not isinstance(value, str) or not SAFE_ID.match(value):
        raise ValidationError(f"Invalid {kind} id")
    return value


class File(Store):
    """Saves each component as one JSON document on the local file system.

    Layout: ``<base_dir>/<user_id>/<component_id>.json``.
    User and component ids must match :data:`SAFE_ID`; anything else raises
    :class:`~componentforge.errors.ValidationError` before the disk is touched.
    """

    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _user_dir(self, user_id: str) -> Path:
        return self.base_dir / _safe_id(user_id, "user")

    def _path(self, user_id: str, component_id: str) -> Path:
        return self._user_dir(user_id) / f"{_safe_id(component_id, 'component')}.json"

    def load_component(self, user_id: str, component_id: str) -> Optional[Component]:
        path = self._path(user_id, component_id)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        try:
            return Component.model_validate_json(text)
        except ValueError:
            logger.error("Could not read component file %s", path, exc_info=True)
            raise

    def save_component(self, user_id: str, component: Component) -> Component:
        with self._lock:
            _check_revision(self.load_component(user_id, component.id), component)
            saved = _stamp(component)
            path = self._path(user_id, component.id)
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.parent / f"{path.name}.tmp"
            tmp_path.write_text(saved.model_dump_json(indent=2), encoding="utf-8")
            tmp_path.replace(path)
        return saved

    def delete_component(self, user_id: str, component_id: str) -> bool:
        with self._lock:
            path = self._path(user_id, component_id)
            if not path.exists():
                return False
            path.unlink()
            return True

    def list_components(self, user_id: str) -> List[str]:
        user_dir = self._user_dir(user_id)
        if not user_dir.exists():
            return []
        loaded = [self.load_component(user_id, path.stem) for path in user_dir.glob("*.json")]
        # a concurrent delete can remove a file between glob and load
        owned = [c for c in loaded if c is not None]
        owned.sort(key=lambda c: c.updated_at, reverse=True)
        return [c.id for c in owned]

    def get_next_component_id(self, user_id: str) -> str:
        ids = [
            int(path.stem)
            for path in self._user_dir(user_id).glob("*.json")
            if path.stem.isdigit()
        ]
        return f"{max(ids, default=0) + 1:03d}"
