from flask import Blueprint, current_app

from ..errors import NotFound
from ..middleware import authenticate, authorize, validate_body, validate_query, validate_uuid
from ..schemas import (
    AmenityQuery,
    BarbershopAmenitiesPayload,
    CreateAmenityPayload,
    UpdateAmenityPayload,
)
from ..services import get_services
from .utils import success_response

amenities_bp = Blueprint("amenities", __name__, url_prefix="/api/amenities")


@amenities_bp.route("", methods=["GET"])
@validate_query(AmenityQuery)
def list_amenities(query: AmenityQuery):
    """
    List amenities
    ---
    tags:
      - Amenities
    security: []
    parameters:
      - in: query
        name: popular
        type: string
        enum: ["true", "false"]
        description: Rank by number of barbershops using each amenity
      - in: query
        name: limit
        type: integer
        default: 10
      - in: query
        name: search
        type: string
    responses:
      200:
        description: Amenities; popular results carry usageCount
    """
    service = get_services().amenities
    if query.popular == "true":
        return success_response(service.get_popular_amenities(query.limit))

    if query.search and query.search.strip():
        amenities = service.search_amenities(query.search.strip())
    else:
        amenities = service.find_all()
    return success_response([amenity.to_dict() for amenity in amenities])


@amenities_bp.route("/<id>", methods=["GET"])
@validate_uuid("id")
def get_amenity(id):
    amenity = get_services().amenities.find_by_id(id)
    if not amenity:
        raise NotFound("Amenity not found")
    return success_response(amenity.to_dict())


@amenities_bp.route("/by-barbershops", methods=["POST"])
@validate_body(BarbershopAmenitiesPayload)
def amenities_by_barbershops(payload: BarbershopAmenitiesPayload):
    """
    Amenities for several barbershops at once
    ---
    tags:
      - Amenities
    security: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            barbershopIds:
              type: array
              items:
                type: string
    responses:
      200:
        description: Map of barbershop id to its amenities (empty list when none)
    """
    grouped = get_services().amenities.get_barbershop_amenities(payload.barbershop_ids)
    return success_response(
        {
            barbershop_id: [amenity.to_dict() for amenity in amenities]
            for barbershop_id, amenities in grouped.items()
        }
    )


@amenities_bp.route("", methods=["POST"])
@authenticate
@authorize("admin")
@validate_body(CreateAmenityPayload)
def create_amenity(payload: CreateAmenityPayload):
    amenity = get_services().amenities.create(payload.name, payload.icon)
    current_app.logger.info(f"Amenity {amenity.name!r} created")
    return success_response(amenity.to_dict(), "Amenity created successfully", 201)


@amenities_bp.route("/<id>", methods=["PUT"])
@authenticate
@authorize("admin")
@validate_uuid("id")
@validate_body(UpdateAmenityPayload)
def update_amenity(id, payload: UpdateAmenityPayload):
    amenity = get_services().amenities.update(id, name=payload.name, icon=payload.icon)
    return success_response(amenity.to_dict(), "Amenity updated successfully")


@amenities_bp.route("/<id>", methods=["DELETE"])
@authenticate
@authorize("admin")
@validate_uuid("id")
def delete_amenity(id):
    get_services().amenities.delete(id)
    return success_response(message="Amenity deleted successfully")
