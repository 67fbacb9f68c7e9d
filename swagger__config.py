"""
Swagger/OpenAPI configuration for the Barber API
"""

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec",
            "route": "/apispec.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/api/docs",
}

SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Barber API",
        "description": "REST API for discovering barbershops, their amenities, opening hours and photos",
        "version": "1.0.0",
    },
    "host": "",
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": 'JWT Authorization header. Example: "Authorization: Bearer {token}"',
        }
    },
    "security": [{"Bearer": []}],
    "tags": [
        {"name": "Authentication", "description": "Registration, login and profile"},
        {"name": "Barbershops", "description": "Barbershop listing, search and management"},
        {"name": "Amenities", "description": "Amenity catalogue"},
        {"name": "Images", "description": "Image upload and removal"},
        {"name": "Utility", "description": "Health and API info"},
    ],
    "definitions": {
        "Error": {
            "type": "object",
            "properties": {
                "success": {"type": "boolean", "example": False},
                "error": {"type": "string"},
                "details": {"type": "array", "items": {"type": "string"}},
            },
        },
        "Success": {
            "type": "object",
            "properties": {
                "success": {"type": "boolean", "example": True},
                "data": {"type": "object"},
                "message": {"type": "string"},
            },
        },
        "User": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "format": "uuid"},
                "email": {"type": "string", "format": "email"},
                "role": {"type": "string", "enum": ["client", "barber", "admin"]},
                "fullName": {"type": "string"},
                "avatarUrl": {"type": "string"},
                "isActive": {"type": "boolean"},
                "createdAt": {"type": "string", "format": "date-time"},
                "updatedAt": {"type": "string", "format": "date-time"},
            },
        },
        "Amenity": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "format": "uuid"},
                "name": {"type": "string", "example": "Wi-Fi"},
                "icon": {"type": "string", "example": "wifi"},
            },
        },
        "OpeningHour": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "format": "uuid"},
                "day": {"type": "string", "example": "Monday"},
                "openTime": {"type": "string", "example": "09:00"},
                "closeTime": {"type": "string", "example": "18:00"},
                "isClosed": {"type": "boolean"},
            },
        },
        "Barbershop": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "format": "uuid"},
                "name": {"type": "string"},
                "address": {"type": "string"},
                "phone": {"type": "string"},
                "logoUrl": {"type": "string"},
                "coverImageUrl": {"type": "string"},
                "rating": {"type": "number", "format": "float"},
                "about": {"type": "string"},
                "images": {"type": "array", "items": {"type": "string"}},
                "createdBy": {"type": "string", "format": "uuid"},
                "amenities": {"type": "array", "items": {"$ref": "#/definitions/Amenity"}},
                "openingHours": {
                    "type": "array",
                    "items": {"$ref": "#/definitions/OpeningHour"},
                },
                "owner": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "string"},
                        "fullName": {"type": "string"},
                        "email": {"type": "string"},
                    },
                },
                "createdAt": {"type": "string", "format": "date-time"},
                "updatedAt": {"type": "string", "format": "date-time"},
            },
        },
    },
}
