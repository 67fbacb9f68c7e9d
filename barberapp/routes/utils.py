from flask import current_app, jsonify, request

from ..services import get_services


def success_response(data=None, message=None, status_code=200):
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    return jsonify(body), status_code


def uploaded_files(field: str):
    """Non-empty file parts sent under ``field``."""
    return [f for f in request.files.getlist(field) if f and f.filename]


def release_uploads(urls):
    """Delete the stored files behind ``urls`` unless another record still points at them.

    Call after the change that dropped the URLs has been committed.
    """
    services = get_services()
    in_use = services.barbershops.referenced_image_urls()
    for url in urls:
        if not url:
            continue
        if url in in_use:
            current_app.logger.info(f"Keeping upload {url}: still referenced")
            continue
        services.storage.delete_url(url)
