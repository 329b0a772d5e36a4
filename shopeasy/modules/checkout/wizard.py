"""Two-step checkout: shipping, then payment.

The current step is a tagged value. A PaymentStep can only be built from a
ShippingInfo that passed validation, so "on payment without an address" cannot
be represented. A closed wizard has no step at all.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Type, TypeVar, Union

from shopeasy.app.common.errors import StorefrontError
from shopeasy.app.common.validation import require_fields
from shopeasy.app.models import PaymentInfo, ShippingInfo


class CheckoutStateError(StorefrontError):
    pass


@dataclass(frozen=True)
class ShippingStep:
    draft: ShippingInfo
    name = "shipping"


@dataclass(frozen=True)
class PaymentStep:
    shipping: ShippingInfo
    draft: PaymentInfo
    name = "payment"


WizardStep = Union[ShippingStep, PaymentStep]
S = TypeVar("S", ShippingStep, PaymentStep)


class CheckoutWizard:
    def __init__(self) -> None:
        self._step: Optional[WizardStep] = None
        # remembered across a Payment -> Shipping -> Payment round trip
        self._payment_draft = PaymentInfo()
        # one-time token for the order this checkout will place
        self.nonce: Optional[str] = None

    @property
    def step(self) -> Optional[WizardStep]:
        return self._step

    @property
    def is_open(self) -> bool:
        return self._step is not None

    def open(self) -> ShippingStep:
        step = ShippingStep(draft=ShippingInfo.blank())
        self._step = step
        self._payment_draft = PaymentInfo()
        self.nonce = uuid.uuid4().hex
        return step

    def close(self) -> None:
        self._step = None
        self._payment_draft = PaymentInfo()
        self.nonce = None

    def submit_shipping(self, info: ShippingInfo) -> PaymentStep:
        self._expect(ShippingStep)
        # keep what was typed even when it does not validate
        self._step = ShippingStep(draft=info)
        require_fields(info.to_dict(), info.required_fields())
        step = PaymentStep(shipping=info, draft=self._payment_draft)
        self._step = step
        return step

    def back(self) -> ShippingStep:
        current = self._expect(PaymentStep)
        self._payment_draft = current.draft
        step = ShippingStep(draft=current.shipping)
        self._step = step
        return step

    def submit_payment(self, info: PaymentInfo) -> Tuple[ShippingInfo, PaymentInfo]:
        current = self._expect(PaymentStep)
        self._step = PaymentStep(shipping=current.shipping, draft=info)
        self._payment_draft = info
        require_fields(info.to_dict(), info.required_fields())
        return current.shipping, info

    def _expect(self, kind: Type[S]) -> S:
        if not isinstance(self._step, kind):
            current = self._step.name if self._step is not None else "closed"
            raise CheckoutStateError(f"Checkout is at step '{current}', expected '{kind.name}'")
        return self._step

    def to_dict(self) -> Optional[Dict[str, Any]]:
        if self._step is None:
            return None
        if isinstance(self._step, ShippingStep):
            return {
                "step": ShippingStep.name,
                "shipping": self._step.draft.to_dict(),
                "payment": self._payment_draft.to_dict(),
                "nonce": self.nonce,
            }
        return {
            "step": PaymentStep.name,
            "shipping": self._step.shipping.to_dict(),
            "payment": self._step.draft.to_dict(),
            "nonce": self.nonce,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CheckoutWizard":
        wizard = cls()
        if not data:
            return wizard
        shipping = ShippingInfo.from_dict(data.get("shipping") or {})
        payment = PaymentInfo.from_dict(data.get("payment") or {})
        wizard._payment_draft = payment
        wizard.nonce = data.get("nonce")
        if data.get("step") == PaymentStep.name:
            wizard._step = PaymentStep(shipping=shipping, draft=payment)
        else:
            wizard._step = ShippingStep(draft=shipping)
        return wizard
