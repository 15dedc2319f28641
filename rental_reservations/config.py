import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in the environment")

# Payment gateway (receipt verification, confirmation and cancellation)
PAYMENT_GATEWAY_URL = os.getenv("PAYMENT_GATEWAY_URL", "https://api.bootpay.co.kr/")
PAYMENT_APPLICATION_ID = os.getenv("PAYMENT_APPLICATION_ID", "")
PAYMENT_PRIVATE_KEY = os.getenv("PAYMENT_PRIVATE_KEY", "")
PAYMENT_TIMEOUT_SECONDS = float(os.getenv("PAYMENT_TIMEOUT_SECONDS", "10"))
PAYMENT_TOKEN_TTL_SECONDS = int(os.getenv("PAYMENT_TOKEN_TTL_SECONDS", "1800"))

# Previous-month occupancy at or above this rate marks a room as recommended
RECOMMENDED_OCCUPANCY_THRESHOLD = float(os.getenv("RECOMMENDED_OCCUPANCY_THRESHOLD", "0.8"))
