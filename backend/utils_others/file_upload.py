from typing import Optional

from supabase import Client

from utils_others.error_handler import PersistenceError

PROFILE_IMAGES_BUCKET = "profile-images"
ALLOWED_IMAGE_TYPES = ("image/png", "image/jpeg", "image/gif", "image/webp", "image/svg+xml")

def upload_to_bucket(
    client: Client,
    bucket: str,
    path: str,
    content: bytes,
    content_type: Optional[str] = None
) -> None:
    """
    Uploads content to a specified Supabase Storage bucket, replacing any object at ``path``.
    """
    try:
        up = client.storage.from_(bucket).upload(
            path,
            content,
            {"content-type": content_type or "application/octet-stream", "upsert": "true"},
        )
    except Exception as e:
        raise PersistenceError(f"Upload error: {e}") from e
    if getattr(up, "error", None):
        raise PersistenceError(f"Upload error: {up.error}")

def get_public_url(client: Client, bucket: str, path: str) -> str:
    url = client.storage.from_(bucket).get_public_url(path)
    if not url:
        raise PersistenceError("Failed to resolve public URL")
    # Some client versions append a bare "?" to public URLs.
    return url.rstrip("?")
