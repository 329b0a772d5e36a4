import pytest

from shopeasy.app.common.errors import ValidationError
from shopeasy.app.models import PaymentInfo, PaymentMethod, ShippingInfo
from shopeasy.modules.checkout.wizard import CheckoutStateError, CheckoutWizard, PaymentStep, ShippingStep

SHIPPING = ShippingInfo(
    full_name="Ada Lovelace",
    address="12 Analytical St",
    city="London",
    state="LDN",
    zip_code="N1 9GU",
    country="United Kingdom",
)

CARD = PaymentInfo(
    payment_method=PaymentMethod.CREDIT_CARD,
    card_name="Ada Lovelace",
    card_number="4111 1111 1111 1111",
    expiry_date="12/30",
    cvv="123",
)


def test_wizard_starts_closed_and_opens_on_shipping():
    wizard = CheckoutWizard()
    assert not wizard.is_open

    step = wizard.open()

    assert isinstance(step, ShippingStep)
    assert step.draft.full_name == ""
    assert step.draft.country == "United States"


@pytest.mark.parametrize("field", ["full_name", "address", "city", "state", "zip_code", "country"])
def test_blank_shipping_field_does_not_advance(field):
    wizard = CheckoutWizard()
    wizard.open()
    incomplete = ShippingInfo(**{**SHIPPING.__dict__, field: "  "})

    with pytest.raises(ValidationError) as exc:
        wizard.submit_shipping(incomplete)

    assert isinstance(wizard.step, ShippingStep)
    assert len(exc.value.missing) == 1
    # what was typed is kept for the re-rendered form
    assert wizard.step.draft.city == incomplete.city


def test_complete_shipping_moves_to_payment():
    wizard = CheckoutWizard()
    wizard.open()

    step = wizard.submit_shipping(SHIPPING)

    assert isinstance(step, PaymentStep)
    assert step.shipping == SHIPPING


def test_back_preserves_shipping_values():
    wizard = CheckoutWizard()
    wizard.open()
    wizard.submit_shipping(SHIPPING)

    step = wizard.back()

    assert isinstance(step, ShippingStep)
    assert step.draft == SHIPPING


def test_back_and_forward_remembers_payment_draft():
    wizard = CheckoutWizard()
    wizard.open()
    wizard.submit_shipping(SHIPPING)
    partial = PaymentInfo(payment_method=PaymentMethod.CREDIT_CARD, card_name="Ada")
    with pytest.raises(ValidationError):
        wizard.submit_payment(partial)

    wizard.back()
    step = wizard.submit_shipping(SHIPPING)

    assert step.draft.card_name == "Ada"


def test_paypal_does_not_require_card_fields():
    wizard = CheckoutWizard()
    wizard.open()
    wizard.submit_shipping(SHIPPING)

    shipping, payment = wizard.submit_payment(PaymentInfo(payment_method=PaymentMethod.PAYPAL))

    assert shipping == SHIPPING
    assert payment.payment_method is PaymentMethod.PAYPAL


def test_credit_card_requires_card_fields():
    wizard = CheckoutWizard()
    wizard.open()
    wizard.submit_shipping(SHIPPING)

    with pytest.raises(ValidationError) as exc:
        wizard.submit_payment(PaymentInfo(payment_method=PaymentMethod.CREDIT_CARD, card_name="Ada"))

    assert exc.value.missing == ["cardNumber", "expiryDate", "cvv"]
    assert isinstance(wizard.step, PaymentStep)


def test_submit_payment_from_shipping_step_is_rejected():
    wizard = CheckoutWizard()
    wizard.open()

    with pytest.raises(CheckoutStateError):
        wizard.submit_payment(CARD)


def test_submit_on_closed_wizard_is_rejected():
    with pytest.raises(CheckoutStateError):
        CheckoutWizard().submit_shipping(SHIPPING)


def test_reopen_starts_over_with_empty_data():
    wizard = CheckoutWizard()
    wizard.open()
    wizard.submit_shipping(SHIPPING)
    wizard.submit_payment(CARD)
    wizard.close()

    step = wizard.open()

    assert isinstance(step, ShippingStep)
    assert step.draft == ShippingInfo.blank()
    wizard.submit_shipping(SHIPPING)
    assert wizard.step.draft == PaymentInfo()


def test_to_dict_from_dict_restores_payment_step():
    wizard = CheckoutWizard()
    wizard.open()
    wizard.submit_shipping(SHIPPING)

    restored = CheckoutWizard.from_dict(wizard.to_dict())

    assert isinstance(restored.step, PaymentStep)
    assert restored.step.shipping == SHIPPING
    assert restored.nonce == wizard.nonce


def test_closed_wizard_serializes_to_none():
    wizard = CheckoutWizard()
    assert wizard.to_dict() is None
    assert not CheckoutWizard.from_dict(None).is_open


def test_each_open_issues_a_fresh_nonce():
    wizard = CheckoutWizard()
    assert wizard.nonce is None

    wizard.open()
    first = wizard.nonce
    wizard.close()
    assert wizard.nonce is None

    wizard.open()
    assert first and wizard.nonce and wizard.nonce != first
