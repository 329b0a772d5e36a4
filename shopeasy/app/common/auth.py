"""Login gate for storefront pages.

There is no server-side token check; a client counts as logged in when its
session holds both a token and a readable user record.
"""

from functools import wraps
from typing import Any, Callable, TypeVar

from flask import flash, redirect, url_for

from shopeasy.app.state import get_storefront

F = TypeVar("F", bound=Callable[..., Any])


def login_required(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not get_storefront().session.is_authenticated:
            flash("Please login first", "info")
            return redirect(url_for("auth.login_page"))
        return fn(*args, **kwargs)

    return wrapper  # type: ignore
