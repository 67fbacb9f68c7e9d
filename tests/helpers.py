import io
import json

from PIL import Image


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def post_json(client, url, body, headers=None, method="post"):
    return getattr(client, method)(
        url,
        data=json.dumps(body),
        content_type="application/json",
        headers=headers or {},
    )


def make_image(fmt="PNG", size=(1024, 768), color=(180, 40, 40)):
    """In-memory image file for upload tests."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, fmt)
    buffer.seek(0)
    return buffer
