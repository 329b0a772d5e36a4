import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "shopeasy")

    # Remote API; every call goes to f"{API_HOST}/api/..."
    API_HOST = os.getenv("API_HOST", "http://localhost:3000").rstrip("/")
    API_TIMEOUT = float(os.getenv("API_TIMEOUT", "10"))

    # Comma-separated list
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

    # How many spent checkout nonces to remember
    CHECKOUT_TOKEN_CAPACITY = int(os.getenv("CHECKOUT_TOKEN_CAPACITY", "10000"))

    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3000"))
