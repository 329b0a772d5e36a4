from __future__ import annotations

import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for

from shopeasy.app.common.auth import login_required
from shopeasy.app.common.errors import GatewayError, StorefrontError, ValidationError
from shopeasy.app.models import PaymentInfo, ShippingInfo
from shopeasy.app.state import get_storefront

logger = logging.getLogger(__name__)

bp = Blueprint("checkout", __name__)


@bp.get("/checkout")
@login_required
def checkout_page():
    storefront = get_storefront()
    if not storefront.wizard.is_open:
        return redirect(url_for("cart.cart_page"))
    return render_template("checkout.html", **storefront.view())


@bp.post("/checkout/shipping")
@login_required
def submit_shipping():
    try:
        get_storefront().submit_shipping(ShippingInfo.from_dict(request.form))
    except ValidationError as err:
        flash(f"{err.message}: {', '.join(err.missing)}", "error")
    except StorefrontError as err:
        flash(err.message, "error")
    return redirect(url_for("checkout.checkout_page"))


@bp.post("/checkout/back")
@login_required
def back():
    try:
        get_storefront().back_to_shipping()
    except StorefrontError as err:
        flash(err.message, "error")
    return redirect(url_for("checkout.checkout_page"))


@bp.post("/checkout/cancel")
@login_required
def cancel():
    get_storefront().cancel_checkout()
    return redirect(url_for("catalog.home"))


@bp.post("/checkout/payment")
@login_required
def place_order():
    storefront = get_storefront()
    try:
        payment = PaymentInfo.from_dict(request.form)
    except ValueError as err:
        flash(str(err), "error")
        return redirect(url_for("checkout.checkout_page"))

    try:
        receipt = storefront.place_order(payment, request.form.get("nonce"))
    except ValidationError as err:
        flash(f"{err.message}: {', '.join(err.missing)}", "error")
        return redirect(url_for("checkout.checkout_page"))
    except GatewayError as err:
        logger.warning("Order placement failed: %s", err.message)
        flash("Order failed. Please try again.", "error")
        return redirect(url_for("checkout.checkout_page"))
    except StorefrontError as err:
        flash(err.message, "error")
        return redirect(url_for("checkout.checkout_page"))

    if receipt is None:
        return redirect(url_for("checkout.checkout_page"))

    flash("Order placed successfully!", "success")
    return redirect(url_for("catalog.home"))
