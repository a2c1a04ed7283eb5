"""Image handle helpers used by the service backend.

The studio core passes image handles around unexamined; only the backend
needs their bytes.
"""

import base64
from urllib.parse import urlparse

import httpx

from ..models import ImageHandle

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "image/avif,image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def is_remote(handle: ImageHandle) -> bool:
    return handle.startswith(("http://", "https://"))


def decode_data_url(handle: ImageHandle) -> bytes:
    """Decode a base64 data URL, or raw base64 without the prefix."""
    if handle.startswith("data:"):
        # Remove data URL prefix (e.g., "data:image/png;base64,")
        _, encoded = handle.split(",", 1)
        return base64.b64decode(encoded)
    return base64.b64decode(handle)


def sniff_mime_type(data: bytes) -> str:
    """Detect image format from magic bytes."""
    if data[:3] == b'\xff\xd8\xff':
        return "image/jpeg"
    if data[:8] == b'\x89PNG\r\n\x1a\n':
        return "image/png"
    if data[:4] == b'RIFF' and data[8:12] == b'WEBP':
        return "image/webp"
    if data[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    return "image/png"


def encode_data_url(data: bytes, mime_type: str | None = None) -> ImageHandle:
    mime_type = mime_type or sniff_mime_type(data)
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('utf-8')}"


async def fetch_image(url: str, client: httpx.AsyncClient) -> bytes:
    """Download a remote image with browser-like headers.

    Referer/Origin help with hotlink protection on retailer sites.
    """
    parsed = urlparse(url)
    origin = f"{parsed.scheme}://{parsed.netloc}"
    headers = dict(BROWSER_HEADERS, Referer=origin + "/", Origin=origin)

    response = await client.get(url, headers=headers, follow_redirects=True)
    response.raise_for_status()
    return response.content


async def load_image(handle: ImageHandle, client: httpx.AsyncClient) -> bytes:
    """Resolve any image handle to raw bytes."""
    if is_remote(handle):
        return await fetch_image(handle, client)
    return decode_data_url(handle)
