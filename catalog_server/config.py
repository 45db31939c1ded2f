"""
Runtime settings for the catalog server.

Everything is read from environment variables once, at import time, the same
way the service URLs and timeouts are configured for the HTTP wrappers.
"""
from __future__ import annotations

import os


# Hosted BaaS (Supabase) connection
SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")

# Storage bucket holding lecture/section files
CATALOG_BUCKET = os.getenv("CATALOG_BUCKET", "course-files")

# Extraction (LLM) settings
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
EXTRACTION_MODEL = os.getenv("EXTRACTION_MODEL", "gpt-5")

# Display language for placeholders and user-facing messages: "ar" or "en"
CATALOG_LANGUAGE = os.getenv("CATALOG_LANGUAGE", "ar")

# Timeout settings (in seconds)
CATALOG_HTTP_TIMEOUT = float(os.getenv("CATALOG_HTTP_TIMEOUT", "30"))
EXTRACTION_TIMEOUT = float(os.getenv("EXTRACTION_TIMEOUT", "600"))  # LLM calls on large PDFs are slow

# Where the MCP gateway finds the HTTP API
CATALOG_SERVICE_URL = os.getenv("CATALOG_SERVICE_URL", "http://localhost:8004")

# Number of placeholder lectures and sections seeded for each new course
PLACEHOLDER_COUNT = 12

# Unused id; "delete where id != NIL_UUID" removes every row
NIL_UUID = "00000000-0000-0000-0000-000000000000"

# Storage cache-control for uploaded files (seconds)
UPLOAD_CACHE_CONTROL = "3600"


def is_configured(url: str = SUPABASE_URL, key: str = SUPABASE_ANON_KEY) -> bool:
    """Return True if the BaaS URL and anon key look like real values."""
    if not url or not key:
        return False
    return url != "YOUR_SUPABASE_URL" and key != "YOUR_SUPABASE_ANON_KEY"
