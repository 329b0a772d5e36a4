from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for

from shopeasy.app.common.errors import GatewayError
from shopeasy.app.common.validation import missing_fields
from shopeasy.app.state import get_storefront

bp = Blueprint("auth", __name__)


@bp.get("/login")
def login_page():
    """GET /login - Sign-in form, or the sign-up form with ?mode=register."""
    if get_storefront().session.is_authenticated:
        return redirect(url_for("catalog.home"))
    mode = "register" if request.args.get("mode") == "register" else "login"
    return render_template("login.html", mode=mode)


@bp.post("/login")
def login():
    """POST /login - Authenticate against the API and start a session."""
    if missing_fields(request.form, ["email", "password"]):
        flash("Email and password are required.", "error")
        return redirect(url_for("auth.login_page"))

    email = request.form["email"].strip()
    try:
        get_storefront().login(email, request.form["password"])
    except GatewayError as err:
        flash(err.message, "error")
        return redirect(url_for("auth.login_page"))

    return redirect(url_for("catalog.home"))


@bp.post("/register")
def register():
    """POST /register - Create an account; the shopper signs in afterwards."""
    if missing_fields(request.form, ["name", "email", "password"]):
        flash("Name, email and password are required.", "error")
        return redirect(url_for("auth.login_page", mode="register"))

    try:
        get_storefront().register(
            request.form["name"].strip(),
            request.form["email"].strip(),
            request.form["password"],
        )
    except GatewayError as err:
        flash(err.message, "error")
        return redirect(url_for("auth.login_page", mode="register"))

    flash("Registration successful! Please login.", "success")
    return redirect(url_for("auth.login_page"))


@bp.post("/logout")
def logout():
    """POST /logout - Drop the session, cart and any open checkout."""
    get_storefront().logout()
    return redirect(url_for("auth.login_page"))
