# artisan_cart/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

CART_API_URL = os.getenv("CART_API_URL", "http://localhost:8000/api")
NOTIFICATIONS_API_URL = os.getenv("NOTIFICATIONS_API_URL", "http://localhost:8000")
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")

#sloty w storage klienta
SLOT_NAMESPACE = os.getenv("SLOT_NAMESPACE", "artisan")
GUEST_CART_KEY = os.getenv("GUEST_CART_KEY", "guest_cart")
CART_COUNT_KEY = os.getenv("CART_COUNT_KEY", "cart_item_count")
LAST_SEEN_CART_COUNT_KEY = os.getenv("LAST_SEEN_CART_COUNT_KEY", "last_seen_cart_count")

#sufit ilosci gdy katalog nie podaje stanu magazynu
DEFAULT_MAX_QUANTITY = int(os.getenv("DEFAULT_MAX_QUANTITY", 999))

#puste -> None, requests bierze swoj domyslny timeout
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT")) if os.getenv("HTTP_TIMEOUT") else None
HTTP_RETRY_ATTEMPTS = int(os.getenv("HTTP_RETRY_ATTEMPTS", 3))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
