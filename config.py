"""
Process configuration for the JamJob backend.

Values come from the environment (a local .env file is loaded first).
Database and PayPal credentials are always supplied externally.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME", "JamJob")

PORT = int(os.getenv("PORT", 2000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", Path(__file__).resolve().parent / "uploads"))

PAYPAL_CLIENT_ID = os.getenv("PAYPAL_CLIENT_ID")
PAYPAL_CLIENT_SECRET = os.getenv("PAYPAL_CLIENT_SECRET")
PAYPAL_MODE = os.getenv("PAYPAL_MODE", "sandbox")
PAYPAL_RETURN_URL = os.getenv("PAYPAL_RETURN_URL", f"http://localhost:{PORT}/success")
PAYPAL_CANCEL_URL = os.getenv("PAYPAL_CANCEL_URL", f"http://localhost:{PORT}/cancel")
PAYPAL_TIMEOUT = float(os.getenv("PAYPAL_TIMEOUT", 10))

# Free job posts per account before payment is required
FREE_JOB_QUOTA = 2

# Fixed checkout price, in minor units
CHECKOUT_AMOUNT = 6000
CHECKOUT_CURRENCY = "USD"
