"""
URL helper utilities for dog photos.
"""
import re

_PHOTO_URL_PATTERN = re.compile(r"^(https?|gs)://\S+$")


def is_photo_url(url: str) -> bool:
    """Accept http(s) URLs and gs://bucket/path references."""
    return bool(url) and bool(_PHOTO_URL_PATTERN.match(url))


def gs_to_public_url(gs_url: str) -> str:
    """
    Convert gs:// URL to public HTTPS URL.

    Args:
        gs_url: GCS URL in format gs://bucket/path/to/file

    Returns:
        str: Public HTTPS URL, or the input unchanged if it is not a gs:// URL
    """
    if not gs_url or not gs_url.startswith("gs://"):
        return gs_url

    bucket, _, file_path = gs_url[len("gs://"):].partition("/")
    if not bucket or not file_path:
        return gs_url
    return f"https://storage.googleapis.com/{bucket}/{file_path}"
