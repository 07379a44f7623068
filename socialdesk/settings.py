# socialdesk/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

# Upstream dashboard backend (the source of raw, inconsistently-keyed JSON)
UPSTREAM_BASE_URL = os.getenv("UPSTREAM_BASE_URL", "http://localhost:3000/api/v1").rstrip("/")
UPSTREAM_TIMEOUT = float(os.getenv("UPSTREAM_TIMEOUT", "30"))
UPSTREAM_LANG = os.getenv("UPSTREAM_LANG", "en")  # sent as x-custom-lang

DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "200"))
OPTIONS_PAGE_SIZE = int(os.getenv("OPTIONS_PAGE_SIZE", "100"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
