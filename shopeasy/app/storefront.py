"""Top-level storefront state.

One Storefront owns the session, the cart, the checkout wizard and the last
product list. Views dispatch every action through the methods below and
render from `view()`.

Network results are tied to the session that issued them. When a login or
logout happens while a call is in flight, the result is dropped instead of
being applied to the new session.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, MutableMapping, Optional

from shopeasy.app.common.errors import GatewayError, StorefrontError
from shopeasy.app.models import OrderReceipt, OrderRequest, PaymentInfo, Product, ProductId, ShippingInfo
from shopeasy.modules.cart.model import Cart
from shopeasy.modules.checkout.tokens import CheckoutTokens
from shopeasy.modules.checkout.wizard import CheckoutWizard
from shopeasy.modules.gateway.client import ApiGateway
from shopeasy.modules.session.store import SessionStore

logger = logging.getLogger(__name__)

CART_KEY = "cart"
CHECKOUT_KEY = "checkout"


class Storefront:
    def __init__(
        self,
        gateway: ApiGateway,
        storage: MutableMapping[str, Any],
        cart: Optional[Cart] = None,
        wizard: Optional[CheckoutWizard] = None,
        tokens: Optional[CheckoutTokens] = None,
    ) -> None:
        self.gateway = gateway
        self.tokens = tokens or CheckoutTokens()
        self.cart = cart or Cart()
        self.wizard = wizard or CheckoutWizard()
        self.session = SessionStore(storage, on_logout=self.cart.clear)
        self.products: List[Product] = []
        self.busy = False

    @classmethod
    def from_storage(
        cls,
        gateway: ApiGateway,
        storage: MutableMapping[str, Any],
        tokens: Optional[CheckoutTokens] = None,
    ) -> "Storefront":
        """Rebuild the per-client state saved by `save`."""
        storefront = cls(
            gateway,
            storage,
            cart=Cart.from_dict(storage.get(CART_KEY)),
            wizard=CheckoutWizard.from_dict(storage.get(CHECKOUT_KEY)),
            tokens=tokens,
        )
        storefront.restore()
        return storefront

    def save(self, storage: MutableMapping[str, Any]) -> None:
        """Write cart and checkout back, touching only the keys that changed.

        An untouched session is left unmodified so the response carries no
        cookie, and a slow read-only request cannot overwrite what a newer
        request (a logout, say) stored meanwhile.
        """
        _put(storage, CART_KEY, self.cart.to_dict() if len(self.cart) else None)
        _put(storage, CHECKOUT_KEY, self.wizard.to_dict())

    # --- session ---

    def restore(self) -> None:
        self.session.restore()
        if not self.session.is_authenticated:
            # cart and checkout never outlive the session they belong to
            self.cart.clear()
            self.wizard.close()

    def login(self, email: str, password: str) -> None:
        user, token = self.gateway.login(email, password)
        self.session.login(user, token)
        logger.info("User %s logged in", user.id)

    def register(self, name: str, email: str, password: str) -> None:
        self.gateway.register(name, email, password)

    def logout(self) -> None:
        self.session.logout()
        self.wizard.close()
        self.products = []

    # --- catalog ---

    def load_products(self) -> List[Product]:
        if not self.session.is_authenticated or self.busy:
            return self.products
        epoch = self.session.epoch
        self.busy = True
        try:
            products = self.gateway.list_products()
        finally:
            self.busy = False
        if self._superseded(epoch, "product list"):
            return self.products
        self.products = products
        return products

    def find_product(self, raw_id: str) -> Optional[Product]:
        for product in self.products:
            if str(product.id) == raw_id:
                return product
        return None

    # --- cart ---

    def add_to_cart(self, product: Product) -> None:
        self.cart.add(product)

    def set_quantity(self, product_id: ProductId, quantity: int) -> None:
        self.cart.set_quantity(product_id, quantity)

    def remove_from_cart(self, product_id: ProductId) -> None:
        self.cart.remove(product_id)

    # --- checkout ---

    def begin_checkout(self) -> None:
        if not self.session.is_authenticated:
            raise StorefrontError("Please login first")
        if not len(self.cart):
            raise StorefrontError("Your cart is empty")
        self.wizard.open()

    def cancel_checkout(self) -> None:
        self.wizard.close()

    def submit_shipping(self, info: ShippingInfo) -> None:
        self.wizard.submit_shipping(info)

    def back_to_shipping(self) -> None:
        self.wizard.back()

    def place_order(self, payment: PaymentInfo, nonce: Optional[str]) -> Optional[OrderReceipt]:
        """Create the order and pay for it.

        `nonce` is the one-time token handed out when checkout opened. Each
        token places at most one order, so a double-clicked or replayed
        submit is a no-op.

        Returns None when the call was suppressed (already placing an order,
        or the nonce is missing or spent) or its result was dropped because
        the session changed meanwhile. Raises ValidationError for blank
        fields and GatewayError when either API call fails; in both cases the
        wizard stays on the payment step and the nonce can be used again.
        """
        if self.busy:
            logger.info("Order placement already in flight; ignoring duplicate submit")
            return None
        user = self.session.user
        if user is None:
            raise StorefrontError("Please login first")
        if not nonce or nonce != self.wizard.nonce or self.tokens.is_spent(nonce):
            logger.info("Ignoring payment submit without a live checkout nonce")
            return None

        shipping, payment = self.wizard.submit_payment(payment)
        order = OrderRequest(user_id=user.id, items=self.cart.snapshot(), shipping=shipping, payment=payment)

        if not self.tokens.claim(nonce):
            logger.info("Order for checkout %s already in flight; ignoring duplicate submit", nonce)
            return None
        epoch = self.session.epoch
        self.busy = True
        try:
            receipt = self.gateway.create_order(order)
            try:
                self.gateway.process_payment(receipt.order_id, receipt.total, payment.payment_method)
            except GatewayError:
                logger.warning("Order %s created but payment failed; no compensation issued", receipt.order_id)
                raise
        except GatewayError:
            self.tokens.release(nonce)
            raise
        finally:
            self.busy = False

        if self._superseded(epoch, "order placement"):
            return None
        self.cart.clear()
        self.wizard.close()
        logger.info("Order %s placed for user %s", receipt.order_id, user.id)
        return receipt

    def _superseded(self, epoch: int, what: str) -> bool:
        if epoch != self.session.epoch:
            logger.info("Discarding %s result from an ended session", what)
            return True
        return False

    # --- read-only snapshot for templates ---

    def view(self) -> Dict[str, Any]:
        return {
            "user": self.session.user,
            "products": self.products,
            "cart": self.cart,
            "cart_count": self.cart.item_count(),
            "cart_total": self.cart.total(),
            "checkout": self.wizard.step,
            "checkout_nonce": self.wizard.nonce,
        }


def _put(storage: MutableMapping[str, Any], key: str, value: Any) -> None:
    if value is None:
        if key in storage:
            del storage[key]
    elif storage.get(key) != value:
        storage[key] = value
