from flask import Blueprint, current_app, g, send_from_directory

from ..middleware import optional_auth
from ..models import utc_now

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health():
    """
    Liveness probe
    ---
    tags:
      - Utility
    security: []
    responses:
      200:
        description: Service is up
        schema:
          type: object
          properties:
            status:
              type: string
              example: OK
            timestamp:
              type: string
    """
    return {"status": "OK", "timestamp": utc_now().isoformat()}, 200


@health_bp.route("/api", methods=["GET"])
@optional_auth
def banner():
    user = g.current_user
    return {
        "success": True,
        "message": "Barber API",
        "version": current_app.config.get("API_VERSION", "1.0.0"),
        "docs": "/api/docs",
        "authenticated": user is not None,
    }, 200


@health_bp.route("/uploads/<path:filename>", methods=["GET"])
def uploaded_file(filename):
    # send_from_directory refuses paths that escape the folder
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
