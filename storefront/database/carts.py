"""
Cart storage

Two backends over raw (product_id, quantity) lines:

- LocalCartStore: device-scoped, one JSON-serialized entry per device
- RemoteCartStore: user-scoped rows keyed by (user_id, product_id)

Both expose the same contract. Writes never raise: a backend failure is
logged and reported as a False return so callers cannot assume success.
"""

import json
import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from ..core.config import settings
from ..core.errors import BackendUnavailable
from ..models.cart import RawCartLine

logger = logging.getLogger(__name__)


class CartStore:
    """Base contract for a cart backend keyed by scope"""

    backend_name = "cart"

    def _read(self, scope: str) -> list[RawCartLine]:
        raise NotImplementedError

    def _write(self, scope: str, lines: list[RawCartLine]) -> None:
        raise NotImplementedError

    def list_lines(self, scope: str) -> list[RawCartLine]:
        """
        Lines stored for a scope, in insertion order.

        Raises:
            BackendUnavailable: if the backend cannot be read
        """
        return self._read(scope)

    def get_line(self, scope: str, product_id: str) -> Optional[RawCartLine]:
        return next((line for line in self._read(scope) if line.product_id == product_id), None)

    def upsert(self, scope: str, product_id: str, quantity: int) -> bool:
        """Insert the line if absent, else overwrite its quantity"""
        try:
            lines = self._read(scope)
            for index, line in enumerate(lines):
                if line.product_id == product_id:
                    lines[index] = RawCartLine(product_id=product_id, quantity=quantity)
                    break
            else:
                lines.append(RawCartLine(product_id=product_id, quantity=quantity))
            self._write(scope, lines)
        except BackendUnavailable as e:
            logger.error(f"{self.backend_name} upsert failed for scope={scope} product={product_id}: {e}")
            return False
        return True

    def remove(self, scope: str, product_id: str) -> bool:
        """Delete one line (no-op if absent)"""
        try:
            lines = self._read(scope)
            remaining = [line for line in lines if line.product_id != product_id]
            if len(remaining) != len(lines):
                self._write(scope, remaining)
        except BackendUnavailable as e:
            logger.error(f"{self.backend_name} remove failed for scope={scope} product={product_id}: {e}")
            return False
        return True

    def clear(self, scope: str) -> bool:
        """Delete every line of a scope"""
        try:
            self._write(scope, [])
        except BackendUnavailable as e:
            logger.error(f"{self.backend_name} clear failed for scope={scope}: {e}")
            return False
        return True


class LocalCartStore(CartStore):
    """Device-scoped store holding one JSON entry per device under a fixed key"""

    backend_name = "local"

    def __init__(self, storage_key: Optional[str] = None):
        self.storage_key = storage_key or settings.cart_storage_key
        self.entries: dict[tuple[str, str], str] = {}

    def _read(self, scope: str) -> list[RawCartLine]:
        stored = self.entries.get((scope, self.storage_key))
        if not stored:
            return []

        try:
            return [RawCartLine.model_validate(item) for item in json.loads(stored)]
        except (json.JSONDecodeError, TypeError, PydanticValidationError) as e:
            logger.warning(f"Discarding unreadable local cart for device={scope}: {e}")
            return []

    def _write(self, scope: str, lines: list[RawCartLine]) -> None:
        if not lines:
            self.entries.pop((scope, self.storage_key), None)
            return
        self.entries[(scope, self.storage_key)] = json.dumps([line.model_dump() for line in lines])

    def reset(self) -> None:
        self.entries.clear()


class RemoteCartStore(CartStore):
    """User-scoped store; rows are unique per (user_id, product_id)"""

    backend_name = "remote"

    def __init__(self):
        self.rows: dict[str, dict[str, int]] = {}

    def _read(self, scope: str) -> list[RawCartLine]:
        return [
            RawCartLine(product_id=product_id, quantity=quantity)
            for product_id, quantity in self.rows.get(scope, {}).items()
        ]

    def _write(self, scope: str, lines: list[RawCartLine]) -> None:
        if not lines:
            self.rows.pop(scope, None)
            return
        self.rows[scope] = {line.product_id: line.quantity for line in lines}

    def reset(self) -> None:
        self.rows.clear()


# Singleton instances
local_cart_store = LocalCartStore()
remote_cart_store = RemoteCartStore()
