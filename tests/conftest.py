import os
import sys
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from shopeasy.app.common.errors import GatewayError
from shopeasy.app.config import Config
from shopeasy.app.factory import create_app
from shopeasy.app.models import OrderReceipt, Product, User


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    API_HOST = "http://api.test"


class FakeGateway:
    """Stands in for ApiGateway; records every call it gets."""

    base_url = "http://api.test/api"

    def __init__(self):
        self.products = [
            Product(id=1, name="Laptop", category="Electronics", price=Decimal("999.99"), stock=5),
            Product(id=2, name="Novel", category="Books", price=Decimal("9.99"), stock=40),
        ]
        self.users = {"test@test.com": ("Test123!", User(id=7, name="Test User", email="test@test.com"))}
        self.login_error = "Invalid credentials"
        self.order_error = None
        self.payment_error = None
        self.calls = []
        # hook run while a call is "in flight", for race tests
        self.during_call = None

    def _in_flight(self):
        if self.during_call is not None:
            self.during_call()

    def list_products(self):
        self.calls.append(("list_products",))
        self._in_flight()
        return list(self.products)

    def register(self, name, email, password):
        self.calls.append(("register", name, email))
        if email in self.users:
            raise GatewayError("User already exists", status_code=409)
        self.users[email] = (password, User(id=len(self.users) + 100, name=name, email=email))

    def login(self, email, password):
        self.calls.append(("login", email))
        record = self.users.get(email)
        if record is None or record[0] != password:
            raise GatewayError(self.login_error, status_code=401)
        return record[1], f"token-{record[1].id}"

    def create_order(self, order):
        self.calls.append(("create_order", order.to_payload()))
        self._in_flight()
        if self.order_error:
            raise GatewayError(self.order_error, status_code=500)
        return OrderReceipt(order_id=501, total=19.98)

    def process_payment(self, order_id, amount, payment_method):
        self.calls.append(("process_payment", order_id, amount, payment_method.value))
        if self.payment_error:
            raise GatewayError(self.payment_error, status_code=402)
        return {"success": True}

    def call_names(self):
        return [c[0] for c in self.calls]


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self._text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._text is not None:
            raise ValueError("not json")
        return self._body


class FakeHttpSession:
    """Minimal requests.Session double: replays queued responses."""

    def __init__(self):
        self.responses = []
        self.requests = []

    def queue(self, response):
        self.responses.append(response)

    def request(self, method, url, **kwargs):
        self.requests.append({"method": method, "url": url, **kwargs})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture()
def fake_gateway():
    return FakeGateway()


@pytest.fixture()
def http_session():
    return FakeHttpSession()


@pytest.fixture()
def response():
    return FakeResponse


@pytest.fixture()
def app(fake_gateway):
    app = create_app(TestConfig)
    app.extensions["shopeasy_gateway"] = fake_gateway
    return app


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def logged_in_client(client):
    client.post("/login", data={"email": "test@test.com", "password": "Test123!"})
    return client


@pytest.fixture()
def laptop(fake_gateway):
    return fake_gateway.products[0]


@pytest.fixture()
def novel(fake_gateway):
    return fake_gateway.products[1]
