# deltacare/core/storage_utils.py
import uuid

from supabase import Client


def upload_to_storage(
    client: Client,
    bucket: str,
    path: str,
    file_bytes: bytes,
    content_type: str,
) -> str:
    """
    Upload raw bytes to Supabase Storage and return a public URL.

    If a file already exists at this path, it will be overwritten
    thanks to the 'upsert' option.

    Args:
        client: Supabase client; a user-scoped client makes Storage
                policies apply to the caller.
        bucket: Storage bucket name.
        path: Full object path inside the bucket.
              Example: "<user_id>/<request_id>.png"
        file_bytes: File content in bytes.
        content_type: MIME type stored with the object.

    Returns:
        Public URL to the uploaded file.

    Raises:
        Any exception raised by Supabase client if upload fails.
    """
    client.storage.from_(bucket).upload(
        path,
        file_bytes,
        {"content-type": content_type, "upsert": "true"},
    )
    return client.storage.from_(bucket).get_public_url(path)


def object_path(owner_id: uuid.UUID, object_id: uuid.UUID, ext: str) -> str:
    """
    Deterministic object path: "<owner_id>/<object_id>.<ext>".

    Re-uploading the same object id overwrites instead of leaving an
    orphaned file behind.
    """
    return f"{owner_id}/{object_id}.{ext}"
