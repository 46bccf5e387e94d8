import os
from typing import Any, Optional

from supabase import create_client, Client

from utils_others.error_handler import PersistenceError

_supabase: Optional[Client] = None

def get_client() -> Client:
    """
    Returns a Supabase client using environment variables for credentials.
    Ensures proper error handling if variables are missing.
    """
    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if not supabase_url or not supabase_key:
        raise RuntimeError("Supabase credentials are not set in the environment variables.")
    return create_client(supabase_url, supabase_key)

def get_supabase() -> Client:
    # Created lazily so the app stays importable before secrets are provided.
    global _supabase
    if _supabase is None:
        try:
            _supabase = get_client()
        except Exception as e:
            raise PersistenceError("Supabase client not configured: " + str(e)) from e
    return _supabase

def execute(query, action: str) -> Any:
    """Run a query builder and turn any failure into a PersistenceError."""
    try:
        res = query.execute()
    except Exception as e:
        raise PersistenceError(f"{action} error: {e}") from e
    err = getattr(res, "error", None)
    if err:
        raise PersistenceError(f"{action} error: {err}")
    return res

def first_row(res) -> Optional[dict]:
    data = getattr(res, "data", None) or []
    if isinstance(data, dict):
        return data
    return data[0] if data else None
