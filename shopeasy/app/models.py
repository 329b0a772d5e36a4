"""Storefront data types.

Products, users and orders are owned by the remote API; these classes are the
client's read-only view of them plus the forms the shopper fills in at
checkout. Wire names are camelCase, Python attributes are snake_case.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Mapping, Union

ProductId = Union[int, str]

DEFAULT_COUNTRY = "United States"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"


@dataclass(frozen=True)
class Product:
    id: ProductId
    name: str
    category: str
    price: Decimal
    stock: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Product":
        try:
            price = Decimal(str(data.get("price", 0)))
        except InvalidOperation:
            raise ValueError(f"invalid price for product {data.get('id')!r}")
        if price < 0:
            raise ValueError(f"negative price for product {data.get('id')!r}")
        return cls(
            id=data["id"],
            name=str(data.get("name") or ""),
            category=str(data.get("category") or ""),
            price=price,
            stock=max(int(data.get("stock") or 0), 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        # Decimal kept as text so it survives the session cookie exactly
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "price": str(self.price),
            "stock": self.stock,
        }


@dataclass(frozen=True)
class User:
    id: Any
    name: str
    email: str

    @classmethod
    def from_dict(cls, data: Any) -> "User":
        if not isinstance(data, dict) or "id" not in data:
            raise ValueError("user record must be an object with an id")
        return cls(
            id=data["id"],
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class CartLine:
    product: Product
    quantity: int

    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


@dataclass(frozen=True)
class ShippingInfo:
    full_name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""

    # wire/form name -> attribute
    FIELDS = {
        "fullName": "full_name",
        "address": "address",
        "city": "city",
        "state": "state",
        "zipCode": "zip_code",
        "country": "country",
    }

    @classmethod
    def blank(cls) -> "ShippingInfo":
        return cls(country=DEFAULT_COUNTRY)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShippingInfo":
        return cls(**{attr: str(data.get(key) or "").strip() for key, attr in cls.FIELDS.items()})

    def to_dict(self) -> Dict[str, str]:
        return {key: getattr(self, attr) for key, attr in self.FIELDS.items()}

    def required_fields(self) -> List[str]:
        return list(self.FIELDS)


@dataclass(frozen=True)
class PaymentInfo:
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD
    card_name: str = ""
    card_number: str = ""
    expiry_date: str = ""
    cvv: str = ""

    CARD_FIELDS = {
        "cardName": "card_name",
        "cardNumber": "card_number",
        "expiryDate": "expiry_date",
        "cvv": "cvv",
    }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PaymentInfo":
        raw_method = str(data.get("paymentMethod") or PaymentMethod.CREDIT_CARD.value)
        try:
            method = PaymentMethod(raw_method)
        except ValueError:
            raise ValueError(f"unsupported payment method {raw_method!r}")
        return cls(
            payment_method=method,
            **{attr: str(data.get(key) or "").strip() for key, attr in cls.CARD_FIELDS.items()},
        )

    def to_dict(self) -> Dict[str, str]:
        data = {"paymentMethod": self.payment_method.value}
        data.update({key: getattr(self, attr) for key, attr in self.CARD_FIELDS.items()})
        return data

    def required_fields(self) -> List[str]:
        if self.payment_method is PaymentMethod.CREDIT_CARD:
            return ["paymentMethod", *self.CARD_FIELDS]
        return ["paymentMethod"]


@dataclass(frozen=True)
class OrderRequest:
    user_id: Any
    items: List[Dict[str, Any]]
    shipping: ShippingInfo
    payment: PaymentInfo

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"userId": self.user_id, "items": self.items}
        payload.update(self.shipping.to_dict())
        payload.update(self.payment.to_dict())
        return payload


@dataclass(frozen=True)
class OrderReceipt:
    order_id: Any
    total: Any

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OrderReceipt":
        if "id" not in data:
            raise ValueError("order response has no id")
        return cls(order_id=data["id"], total=data.get("total"))
