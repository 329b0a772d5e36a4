"""Per-request Storefront bound to the client's session cookie."""

from flask import Response, current_app, g, session

from shopeasy.app.storefront import Storefront


def get_storefront() -> Storefront:
    if "storefront" not in g:
        g.storefront = Storefront.from_storage(
            current_app.extensions["shopeasy_gateway"],
            session,
            tokens=current_app.extensions["shopeasy_checkout_tokens"],
        )
    return g.storefront


def save_storefront(response: Response) -> Response:
    storefront = g.pop("storefront", None)
    if storefront is not None:
        storefront.save(session)
    return response
