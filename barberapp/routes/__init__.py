from .amenities import amenities_bp
from .auth import auth_bp
from .barbershops import barbershops_bp
from .health import health_bp

blueprints = [health_bp, auth_bp, barbershops_bp, amenities_bp]

__all__ = ["amenities_bp", "auth_bp", "barbershops_bp", "blueprints", "health_bp"]
