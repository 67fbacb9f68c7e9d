from flask import Blueprint, current_app, g

from ..errors import ImageProcessingError, NotFound
from ..middleware import authenticate, authorize, validate_body, validate_query, validate_uuid
from ..schemas import (
    BarbershopAmenityPayload,
    BarbershopQuery,
    CreateBarbershopPayload,
    RemoveImagePayload,
    UpdateBarbershopPayload,
)
from ..services import get_services
from .utils import release_uploads, success_response, uploaded_files

barbershops_bp = Blueprint("barbershops", __name__, url_prefix="/api/barbershops")

SHOP_ROLES = ("barber", "admin")


def _serialize(barbershops):
    return [barbershop.to_dict() for barbershop in barbershops]


@barbershops_bp.route("", methods=["GET"])
@validate_query(BarbershopQuery)
def list_barbershops(query: BarbershopQuery):
    """
    List or search barbershops
    ---
    tags:
      - Barbershops
    security: []
    parameters:
      - in: query
        name: search
        type: string
        description: Case-insensitive match on name, address or about
      - in: query
        name: sortBy
        type: string
        enum: [name, rating, createdAt]
        default: name
      - in: query
        name: sortOrder
        type: string
        enum: [ASC, DESC]
        default: ASC
    responses:
      200:
        description: Barbershops with amenities, opening hours and owner summary
        schema:
          $ref: '#/definitions/Success'
    """
    service = get_services().barbershops
    if query.search and query.search.strip():
        barbershops = service.search_barbershops(query.search.strip())
    else:
        barbershops = service.find_all(sort_by=query.sort_by, sort_order=query.sort_order)
    return success_response(_serialize(barbershops))


@barbershops_bp.route("/<id>", methods=["GET"])
@validate_uuid("id")
def get_barbershop(id):
    """
    Barbershop details
    ---
    tags:
      - Barbershops
    security: []
    parameters:
      - in: path
        name: id
        type: string
        format: uuid
        required: true
    responses:
      200:
        description: The barbershop
      400:
        description: Invalid id
      404:
        description: Barbershop not found
    """
    barbershop = get_services().barbershops.find_by_id(id)
    if not barbershop:
        raise NotFound("Barbershop not found")
    return success_response(barbershop.to_dict())


@barbershops_bp.route("/<id>/amenities", methods=["GET"])
@validate_uuid("id")
def get_barbershop_amenities(id):
    barbershop = get_services().barbershops.find_by_id(id)
    if not barbershop:
        raise NotFound("Barbershop not found")
    return success_response([amenity.to_dict() for amenity in barbershop.amenities])


@barbershops_bp.route("/user/my-barbershops", methods=["GET"])
@authenticate
@authorize(*SHOP_ROLES)
def my_barbershops():
    barbershops = get_services().barbershops.find_by_user_id(g.current_user.id)
    return success_response(_serialize(barbershops))


@barbershops_bp.route("", methods=["POST"])
@authenticate
@authorize(*SHOP_ROLES)
@validate_body(CreateBarbershopPayload)
def create_barbershop(payload: CreateBarbershopPayload):
    """
    Create a barbershop owned by the caller
    ---
    tags:
      - Barbershops
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required:
            - name
            - address
          properties:
            name:
              type: string
            address:
              type: string
            phone:
              type: string
            about:
              type: string
            logoUrl:
              type: string
            coverImageUrl:
              type: string
            amenityIds:
              type: array
              items:
                type: string
            openingHours:
              type: array
              items:
                type: object
                properties:
                  day:
                    type: string
                  openTime:
                    type: string
                  closeTime:
                    type: string
                  isClosed:
                    type: boolean
    responses:
      201:
        description: Barbershop created
      403:
        description: Caller is not a barber or admin
    """
    barbershop = get_services().barbershops.create(payload.model_dump(), g.current_user.id)
    current_app.logger.info(f"Barbershop {barbershop.id} created by {g.current_user.id}")
    return success_response(barbershop.to_dict(), "Barbershop created successfully", 201)


@barbershops_bp.route("/<id>", methods=["PUT"])
@authenticate
@authorize(*SHOP_ROLES)
@validate_uuid("id")
@validate_body(UpdateBarbershopPayload)
def update_barbershop(id, payload: UpdateBarbershopPayload):
    """
    Update a barbershop
    ---
    tags:
      - Barbershops
    description: >
      Omitted fields are kept. amenityIds and openingHours, when present,
      replace the stored collections; an empty list clears them.
    parameters:
      - in: path
        name: id
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
    responses:
      200:
        description: Updated barbershop
      403:
        description: Caller is neither owner nor admin
      404:
        description: Barbershop not found
    """
    barbershop = get_services().barbershops.update(id, payload.model_dump(), g.current_user.id)
    return success_response(barbershop.to_dict(), "Barbershop updated successfully")


@barbershops_bp.route("/<id>", methods=["DELETE"])
@authenticate
@authorize(*SHOP_ROLES)
@validate_uuid("id")
def delete_barbershop(id):
    services = get_services()
    barbershop = services.barbershops.ensure_can_modify(id, g.current_user.id)
    stored_urls = list(barbershop.images or []) + [barbershop.logo_url, barbershop.cover_image_url]

    services.barbershops.delete(id, g.current_user.id)
    release_uploads(stored_urls)
    return success_response(message="Barbershop deleted successfully")


@barbershops_bp.route("/<id>/amenities", methods=["POST"])
@authenticate
@authorize(*SHOP_ROLES)
@validate_uuid("id")
@validate_body(BarbershopAmenityPayload)
def add_amenities(id, payload: BarbershopAmenityPayload):
    barbershop = get_services().barbershops.add_amenities(id, payload.amenity_ids, g.current_user.id)
    return success_response(barbershop.to_dict(), "Amenities added successfully")


@barbershops_bp.route("/<id>/amenities/<amenityId>", methods=["DELETE"])
@authenticate
@authorize(*SHOP_ROLES)
@validate_uuid("id", "amenityId")
def remove_amenity(id, amenityId):
    barbershop = get_services().barbershops.remove_amenity(id, amenityId, g.current_user.id)
    return success_response(barbershop.to_dict(), "Amenity removed successfully")


@barbershops_bp.route("/<id>/images", methods=["POST"])
@authenticate
@authorize(*SHOP_ROLES)
@validate_uuid("id")
def upload_images(id):
    """
    Upload gallery images
    ---
    tags:
      - Images
    consumes:
      - multipart/form-data
    parameters:
      - in: path
        name: id
        type: string
        required: true
      - in: formData
        name: images
        type: file
        required: true
        description: Up to 5 JPEG, PNG or WebP files of at most 5MB each
    responses:
      200:
        description: Barbershop with the new image URLs appended
      400:
        description: No files, too many files, oversized or wrong type
      500:
        description: None of the images could be processed
    """
    services = get_services()
    services.barbershops.ensure_can_modify(id, g.current_user.id)

    files = uploaded_files("images")
    services.storage.validate_batch(files, "barbershops")

    urls = []
    for file in files:
        try:
            urls.append(services.storage.store_image(file, "barbershops", 800, 600)["url"])
        except ImageProcessingError as e:
            current_app.logger.warning(f"Skipping upload {file.filename!r} for barbershop {id}: {e}")

    if not urls:
        raise ImageProcessingError("Failed to process uploaded images")

    try:
        barbershop = services.barbershops.add_images(id, urls, g.current_user.id)
    except Exception:
        for url in urls:
            services.storage.delete_url(url)
        raise

    skipped = len(files) - len(urls)
    message = f"{len(urls)} image(s) uploaded successfully"
    if skipped:
        message += f", {skipped} skipped"
    return success_response(barbershop.to_dict(), message)


@barbershops_bp.route("/<id>/images", methods=["DELETE"])
@authenticate
@authorize(*SHOP_ROLES)
@validate_uuid("id")
@validate_body(RemoveImagePayload)
def remove_image(id, payload: RemoveImagePayload):
    barbershop = get_services().barbershops.remove_image(id, payload.image_url, g.current_user.id)
    release_uploads([payload.image_url])
    return success_response(barbershop.to_dict(), "Image removed successfully")
