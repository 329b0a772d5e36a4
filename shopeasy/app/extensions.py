from flask_cors import CORS

from shopeasy.modules.checkout.tokens import CheckoutTokens
from shopeasy.modules.gateway.client import ApiGateway

# Singletons (initialized in app factory)
gateway = ApiGateway()
checkout_tokens = CheckoutTokens()
cors = CORS()
