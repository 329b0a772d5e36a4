from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, url_for

from shopeasy.app.common.auth import login_required
from shopeasy.app.state import get_storefront

bp = Blueprint("catalog", __name__)


@bp.get("/")
def home():
    # Entry document: sign-in for anonymous clients, the product grid otherwise.
    storefront = get_storefront()
    if not storefront.session.is_authenticated:
        return render_template("login.html", mode="login")

    storefront.load_products()
    return render_template("products.html", **storefront.view())


@bp.post("/cart/add/<product_id>")
@login_required
def add_to_cart(product_id: str):
    storefront = get_storefront()
    storefront.load_products()
    product = storefront.find_product(product_id)
    if product is None:
        flash("Product not found", "error")
        return redirect(url_for("catalog.home"))

    storefront.add_to_cart(product)
    flash(f"{product.name} added to cart", "success")
    return redirect(url_for("catalog.home"))
