# src/depot_allocation/utils/config.py
"""
Runtime settings for the depot dashboard back end.

Everything comes from the environment (or the project .env) with local-safe defaults.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root
BASE_DIR = Path(__file__).resolve().parents[3]
load_dotenv(BASE_DIR / ".env")


class Config:
    DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'depot_allocation.db'}").strip()

    SMTP_SERVER = os.getenv("SMTP_SERVER", "localhost")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "25"))
    SENDER_EMAIL = os.getenv("SENDER_EMAIL", "depot-dashboard@localhost")
    DEFAULT_RECIPIENTS = [
        e.strip() for e in os.getenv("DEFAULT_RECIPIENTS", "").split(",")
        if e.strip()
    ]

    # Dashboard alert bands (percent of capacity)
    ALERT_WARNING_PCT = float(os.getenv("ALERT_WARNING_PCT", "80"))
    ALERT_CRITICAL_PCT = float(os.getenv("ALERT_CRITICAL_PCT", "90"))

    # Vessel manifests are discharged into this depot
    MANIFEST_DEPOT_KEYWORD = os.getenv("MANIFEST_DEPOT_KEYWORD", "Yon")

    OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", BASE_DIR / "output"))

    @property
    def database_backend(self) -> str:
        return self.DATABASE_URL.split(":", 1)[0]

    def __repr__(self):
        return f"<Config db={self.database_backend} smtp={self.SMTP_SERVER}:{self.SMTP_PORT}>"


# Singleton
config = Config()
