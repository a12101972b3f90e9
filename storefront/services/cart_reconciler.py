"""
Cart Reconciler

Owns the hydrated Cart for one caller:
1. Merges the device cart into the user's cart at login
2. Routes mutations to the active backend (device or user scope)
3. Reloads and re-hydrates against the catalog after every mutation
"""

import logging

from ..core.errors import BackendUnavailable, CartLineNotFound, InvalidQuantity
from ..core.identity import Identity
from ..database.carts import CartStore
from ..database.products import ProductDatabase
from ..models.cart import Cart, CartLine, RawCartLine

logger = logging.getLogger(__name__)


class CartReconciler:
    """
    Keeps the Cart consistent with whichever backend the identity selects.

    Every mutation is followed by a full reload so totals, prices and stock
    always reflect backend and catalog state. Not safe against concurrent
    writers for the same scope; callers serialize mutations per session.
    """

    def __init__(
        self,
        device_id: str,
        local_store: CartStore,
        remote_store: CartStore,
        catalog: ProductDatabase,
    ):
        self.device_id = device_id
        self.local_store = local_store
        self.remote_store = remote_store
        self.catalog = catalog
        self.identity = Identity.anonymous()
        self.cart = Cart()

    @property
    def _active(self) -> tuple[CartStore, str]:
        if self.identity.is_authenticated:
            return self.remote_store, self.identity.user_id
        return self.local_store, self.device_id

    # ==================== Loading ====================

    def initialize(self, identity: Identity) -> Cart:
        """Adopt the identity, merge the device cart if authenticated, then load"""
        self.identity = identity
        if identity.is_authenticated:
            self.merge_local_into_remote(identity.user_id)
        return self.reload()

    def merge_local_into_remote(self, user_id: str) -> int:
        """
        Copy device lines into the user's cart, local quantity winning on conflict.

        The device scope is cleared only once every line has been written;
        lines whose upsert failed stay on the device for the next attempt.

        Returns:
            Number of lines merged
        """
        try:
            local_lines = self.local_store.list_lines(self.device_id)
        except BackendUnavailable as e:
            logger.error(f"Skipping cart merge, device cart unreadable: {e}")
            return 0

        if not local_lines:
            return 0

        merged: list[str] = []
        failed: list[str] = []
        for line in local_lines:
            if self.remote_store.upsert(user_id, line.product_id, line.quantity):
                merged.append(line.product_id)
            else:
                failed.append(line.product_id)

        if not failed:
            self.local_store.clear(self.device_id)
            logger.info(f"Merged {len(merged)} device cart line(s) into user={user_id}")
        else:
            for product_id in merged:
                self.local_store.remove(self.device_id, product_id)
            logger.warning(
                f"Partial cart merge for user={user_id}: "
                f"{len(merged)} merged, {len(failed)} kept on device {self.device_id}"
            )

        return len(merged)

    def hydrate(self, raw_lines: list[RawCartLine]) -> Cart:
        """
        Join raw lines with the catalog in one batched lookup.

        Lines whose product no longer exists are dropped.
        """
        if not raw_lines:
            return Cart()

        products = self.catalog.get_products(line.product_id for line in raw_lines)

        lines: list[CartLine] = []
        for raw in raw_lines:
            product = products.get(raw.product_id)
            if product is None:
                logger.warning(f"Dropping cart line for missing product {raw.product_id}")
                continue
            lines.append(
                CartLine(
                    product_id=raw.product_id,
                    quantity=raw.quantity,
                    title=product.title,
                    unit_price=product.price,
                    discount_percentage=product.discount_percentage,
                    thumbnail=product.thumbnail,
                    stock=product.stock,
                )
            )

        return Cart(lines=tuple(lines))

    def reload(self) -> Cart:
        """Re-read the active backend; keep the last good cart on failure"""
        store, scope = self._active
        try:
            self.cart = self.hydrate(store.list_lines(scope))
        except BackendUnavailable as e:
            logger.error(f"Cart reload failed for {store.backend_name} scope={scope}: {e}")
        return self.cart

    # ==================== Mutations ====================

    def add_to_cart(self, product_id: str, quantity: int = 1) -> Cart:
        """Add quantity to the line, creating it if absent"""
        self._check_quantity(quantity)
        store, scope = self._active

        try:
            existing = store.get_line(scope, product_id)
        except BackendUnavailable as e:
            logger.error(f"Cart read failed for {store.backend_name} scope={scope}: {e}")
            return self.cart

        new_quantity = quantity + (existing.quantity if existing else 0)
        store.upsert(scope, product_id, new_quantity)
        return self.reload()

    def update_quantity(self, product_id: str, quantity: int) -> Cart:
        """Overwrite the line's quantity; zero or less removes it"""
        if quantity <= 0:
            return self.remove_from_cart(product_id)

        self._check_quantity(quantity)
        store, scope = self._active

        try:
            existing = store.get_line(scope, product_id)
        except BackendUnavailable as e:
            logger.error(f"Cart read failed for {store.backend_name} scope={scope}: {e}")
            return self.cart

        if existing is None:
            raise CartLineNotFound(product_id)

        store.upsert(scope, product_id, quantity)
        return self.reload()

    def remove_from_cart(self, product_id: str) -> Cart:
        store, scope = self._active
        store.remove(scope, product_id)
        return self.reload()

    def clear_cart(self) -> Cart:
        store, scope = self._active
        store.clear(scope)
        return self.reload()

    # ==================== Helpers ====================

    @staticmethod
    def _check_quantity(quantity) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidQuantity(quantity)

