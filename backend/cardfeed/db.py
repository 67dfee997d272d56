"""
Database client configuration.
Uses Supabase for the remote config row and content card event log.
"""

import os
from typing import Optional

from supabase import create_client, Client
from dotenv import load_dotenv

load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY")

REMOTE_CONFIG_TABLE = os.getenv("REMOTE_CONFIG_TABLE", "remote_config")
ANALYTICS_TABLE = os.getenv("ANALYTICS_TABLE", "content_card_events")

# Admin client for service-level operations (bypasses RLS).
# None when Supabase is not configured; the services then fall back to
# in-process storage.
supabase_admin: Optional[Client] = (
    create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
    if SUPABASE_URL and SUPABASE_SERVICE_KEY
    else None
)
