from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for

from shopeasy.app.common.auth import login_required
from shopeasy.app.common.errors import StorefrontError
from shopeasy.app.state import get_storefront

bp = Blueprint("cart", __name__)


@bp.get("/cart")
@login_required
def cart_page():
    return render_template("cart.html", **get_storefront().view())


@bp.post("/cart/<product_id>/quantity")
@login_required
def update_quantity(product_id: str):
    storefront = get_storefront()
    try:
        quantity = int(request.form.get("quantity", ""))
    except ValueError:
        flash("Quantity must be a whole number", "error")
        return redirect(url_for("cart.cart_page"))

    resolved = storefront.cart.resolve_id(product_id)
    if resolved is not None:
        # 0 (the "-" button on a single item) removes the line
        storefront.set_quantity(resolved, quantity)
    return redirect(url_for("cart.cart_page"))


@bp.post("/cart/<product_id>/remove")
@login_required
def remove_item(product_id: str):
    storefront = get_storefront()
    resolved = storefront.cart.resolve_id(product_id)
    if resolved is not None:
        storefront.remove_from_cart(resolved)
    return redirect(url_for("cart.cart_page"))


@bp.post("/cart/checkout")
@login_required
def checkout():
    try:
        get_storefront().begin_checkout()
    except StorefrontError as err:
        flash(err.message, "error")
        return redirect(url_for("cart.cart_page"))
    return redirect(url_for("checkout.checkout_page"))
