from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests
from flask import Flask

from shopeasy.app.common.errors import GatewayError
from shopeasy.app.common.request_context import REQUEST_ID_HEADER, current_request_id
from shopeasy.app.models import OrderReceipt, OrderRequest, PaymentMethod, Product, User

logger = logging.getLogger(__name__)

DEFAULT_API_HOST = "http://localhost:3000"


class ApiGateway:
    """Client for the remote product/order/payment/auth API."""

    def __init__(
        self,
        api_host: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = f"{(api_host or DEFAULT_API_HOST).rstrip('/')}/api"
        self.timeout = timeout
        self._session = session or requests.Session()

    def init_app(self, app: Flask) -> None:
        self.base_url = f"{app.config.get('API_HOST', DEFAULT_API_HOST).rstrip('/')}/api"
        self.timeout = float(app.config.get("API_TIMEOUT", self.timeout))
        app.extensions["shopeasy_gateway"] = self

    # --- catalog ---

    def list_products(self) -> List[Product]:
        try:
            data = self._request("GET", "/products", default_message="Could not load products")
            if not isinstance(data, list):
                raise GatewayError("Unexpected product list payload")
        except GatewayError as exc:
            logger.warning("Error fetching products: %s", exc)
            return []

        products = []
        for item in data:
            try:
                products.append(Product.from_dict(item))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed product %r: %s", item, exc)
        return products

    # --- users ---

    def register(self, name: str, email: str, password: str) -> None:
        self._request(
            "POST",
            "/users/register",
            json={"name": name, "email": email, "password": password},
            default_message="Registration failed",
        )

    def login(self, email: str, password: str) -> Tuple[User, str]:
        data = self._request(
            "POST",
            "/users/login",
            json={"email": email, "password": password},
            default_message="Login failed",
        )
        try:
            return User.from_dict(data.get("user")), str(data["token"])
        except (AttributeError, KeyError, ValueError):
            raise GatewayError("Login failed")

    # --- orders ---

    def create_order(self, order: OrderRequest) -> OrderReceipt:
        data = self._request("POST", "/orders", json=order.to_payload(), default_message="Order failed")
        try:
            return OrderReceipt.from_dict(data)
        except (TypeError, ValueError):
            raise GatewayError("Order failed")

    def process_payment(self, order_id: Any, amount: Any, payment_method: PaymentMethod) -> Any:
        return self._request(
            "POST",
            "/payments/process",
            json={"orderId": order_id, "amount": amount, "paymentMethod": payment_method.value},
            default_message="Payment failed",
        )

    # --- plumbing ---

    def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        default_message: str = "Request failed",
    ) -> Any:
        url = f"{self.base_url}{path}"
        headers = {}
        rid = current_request_id()
        if rid:
            headers[REQUEST_ID_HEADER] = rid

        try:
            response = self._session.request(
                method=method,
                url=url,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise GatewayError(default_message) from exc

        if not response.ok:
            message = _error_message(response) or default_message
            logger.info("%s %s -> %s: %s", method, url, response.status_code, message)
            raise GatewayError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise GatewayError(default_message, status_code=response.status_code) from exc


def _error_message(response: requests.Response) -> Optional[str]:
    """Pull a human message out of `{"error": "..."}` or `{"error": {"message": "..."}}`."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    err = body.get("error")
    if isinstance(err, dict):
        err = err.get("message")
    if isinstance(err, str) and err.strip():
        return err
    return None
