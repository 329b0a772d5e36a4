from __future__ import annotations

from flask import Blueprint, current_app

cli_bp = Blueprint("cli", __name__, cli_group=None)


@cli_bp.cli.command("check-api")
def check_api() -> None:
    """Fetch the product list from the remote API and report what came back.

    An empty result means the API was unreachable or returned nothing; the
    gateway logs the underlying error.
    """

    gateway = current_app.extensions["shopeasy_gateway"]
    products = gateway.list_products()
    print(f"{gateway.base_url}: {len(products)} products")
    for product in products:
        print(f"  {product.id}\t{product.name}\t{product.price}\t{product.stock} in stock")
