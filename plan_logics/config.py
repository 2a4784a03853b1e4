# plan_logics/config.py

import os

# --- General Configuration ---
LOG_LEVEL = os.getenv('PLAN_LOG_LEVEL', 'INFO')

# --- Backend API ---
# Base URL of the planning API (FastAPI). Falls back to the local dev server.
API_BASE = (
    os.getenv('PLAN_API_BASE')
    or os.getenv('API_BASE')
    or 'http://localhost:8000'
).rstrip('/')
HTTP_TIMEOUT_SECONDS = float(os.getenv('PLAN_HTTP_TIMEOUT', 30))
TOKEN_KEY = 'token'  # key of the bearer token in the key-value store

# --- Plan years (Buddhist era) ---
# plan_id = year - PLAN_YEAR_OFFSET  (2569 -> 1, 2570 -> 2, ...)
YEAR_BASE = int(os.getenv('PLAN_YEAR_BASE', 2569))
YEAR_COUNT = int(os.getenv('PLAN_YEAR_COUNT', 11))
PLAN_YEAR_OFFSET = 2568

# --- Cell input ---
MAX_DECIMALS = int(os.getenv('PLAN_MAX_DECIMALS', 3))
DISPLAY_DECIMALS = int(os.getenv('PLAN_DISPLAY_DECIMALS', 0))

# --- Grid layout (pixels) ---
COL_W = {
    'code': 72,
    'item': 380,
    'cell': 120,
    'total': 120,
}
ROW_HEIGHT = int(os.getenv('PLAN_ROW_HEIGHT', 30))
SCROLL_PAD = int(os.getenv('PLAN_SCROLL_PAD', 12))  # margin kept around a focused cell

# --- Auth ---
# Bearer token seeded into the token store at startup (login is handled elsewhere).
API_TOKEN = os.getenv('PLAN_API_TOKEN', '')
