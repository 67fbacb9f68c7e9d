from flask import Blueprint, current_app, g

from ..errors import ValidationError
from ..middleware import authenticate, validate_body
from ..schemas import ChangePasswordPayload, LoginPayload, RegisterPayload, UpdateProfilePayload
from ..services import get_services
from .utils import release_uploads, success_response, uploaded_files

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/register", methods=["POST"])
@validate_body(RegisterPayload)
def register(payload: RegisterPayload):
    """
    Register a new client or barber
    ---
    tags:
      - Authentication
    security: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - email
            - password
          properties:
            email:
              type: string
              example: a@b.com
            password:
              type: string
              minLength: 6
            fullName:
              type: string
            role:
              type: string
              enum: [client, barber]
    responses:
      201:
        description: User created, token issued
      400:
        description: Validation failed
        schema:
          $ref: '#/definitions/Error'
      409:
        description: Email already registered
        schema:
          $ref: '#/definitions/Error'
    """
    result = get_services().auth.register(
        payload.email,
        payload.password,
        full_name=payload.full_name,
        role=payload.role,
    )
    current_app.logger.info(f"Registered user {result['user']['id']} ({payload.role})")
    return success_response(result, "User registered successfully", 201)


@auth_bp.route("/login", methods=["POST"])
@validate_body(LoginPayload)
def login(payload: LoginPayload):
    """
    Log in with email and password
    ---
    tags:
      - Authentication
    security: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            email:
              type: string
            password:
              type: string
    responses:
      200:
        description: User and bearer token
      401:
        description: Invalid credentials
        schema:
          $ref: '#/definitions/Error'
    """
    result = get_services().auth.login(payload.email, payload.password)
    return success_response(result, "Login successful")


@auth_bp.route("/logout", methods=["POST"])
@authenticate
def logout():
    # Tokens are stateless; the client just forgets it
    return success_response(message="Logged out successfully")


@auth_bp.route("/me", methods=["GET"])
@authenticate
def me():
    """
    Current user profile
    ---
    tags:
      - Authentication
    responses:
      200:
        description: The authenticated user
      401:
        description: Missing or invalid token
    """
    return success_response(g.current_user.to_dict())


@auth_bp.route("/profile", methods=["PUT"])
@authenticate
@validate_body(UpdateProfilePayload)
def update_profile(payload: UpdateProfilePayload):
    user = get_services().auth.update_profile(g.current_user.id, full_name=payload.full_name)
    return success_response(user.to_dict(), "Profile updated successfully")


@auth_bp.route("/change-password", methods=["PUT"])
@authenticate
@validate_body(ChangePasswordPayload)
def change_password(payload: ChangePasswordPayload):
    get_services().auth.change_password(
        g.current_user.id, payload.current_password, payload.new_password
    )
    return success_response(message="Password changed successfully")


@auth_bp.route("/validate", methods=["GET"])
@authenticate
def validate():
    return success_response({"valid": True, "user": g.current_user.to_dict()})


@auth_bp.route("/profile/avatar", methods=["POST"])
@authenticate
def upload_avatar():
    """
    Upload a profile picture
    ---
    tags:
      - Authentication
      - Images
    consumes:
      - multipart/form-data
    parameters:
      - in: formData
        name: avatar
        type: file
        required: true
    responses:
      200:
        description: Updated user with new avatarUrl
      400:
        description: Missing, oversized or non-image file
    """
    services = get_services()
    files = uploaded_files("avatar")
    if not files:
        raise ValidationError("No image file provided")
    services.storage.validate_batch(files, "profiles")

    stored = services.storage.store_image(files[0], "profiles", 400, 400)
    try:
        previous = services.auth.set_avatar(g.current_user.id, stored["url"])
    except Exception:
        services.storage.delete_url(stored["url"])
        raise

    if previous:
        release_uploads([previous])
    return success_response(
        {**g.current_user.to_dict(), "thumbnailUrl": stored["thumbnailUrl"]},
        "Avatar updated successfully",
    )
