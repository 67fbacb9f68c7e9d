import os

from barberapp.seeds import seed_admin, seed_amenities
from main import create_app

app = create_app()

with app.app_context():
    seed_amenities()

    admin_email = os.environ.get("ADMIN_EMAIL")
    admin_password = os.environ.get("ADMIN_PASSWORD")
    if admin_email and admin_password:
        seed_admin(admin_email, admin_password)
    else:
        app.logger.info("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin account")

app.logger.info("Seeding finished")
