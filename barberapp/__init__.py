"""Barbershop discovery API: accounts, barbershops, amenities and image uploads."""
