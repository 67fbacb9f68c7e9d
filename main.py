import logging
import os

import click
from dotenv import load_dotenv
from flasgger import Swagger
from flask import Flask

from swagger__config import SWAGGER_CONFIG, SWAGGER_TEMPLATE

load_dotenv()
from barberapp.config import Config  # noqa: E402
from barberapp.errors import register_error_handlers  # noqa: E402
from barberapp.extensions import cors, db  # noqa: E402
from barberapp.models import Base  # noqa: E402
from barberapp.routes import blueprints  # noqa: E402
from barberapp.scheduler import init_scheduler  # noqa: E402
from barberapp.seeds import seed_admin, seed_amenities  # noqa: E402
from barberapp.services import init_services  # noqa: E402


def register_commands(app):
    @app.cli.command("seed-amenities")
    def seed_amenities_command():
        """Insert the default amenities."""
        added = seed_amenities()
        click.echo(f"{added} amenities added")

    @app.cli.command("create-admin")
    @click.argument("email")
    @click.password_option()
    def create_admin_command(email, password):
        """Create an admin account."""
        user = seed_admin(email, password)
        click.echo(f"Admin ready: {user.email}")


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    app.logger.setLevel(getattr(logging, app.config.get("LOG_LEVEL", "INFO"), logging.INFO))

    cors.init_app(app, resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}})
    db.init_app(app)

    with app.app_context():
        Base.metadata.create_all(bind=db.engine)

    init_services(app)
    register_error_handlers(app)

    host = os.environ.get("API_HOST", "127.0.0.1:5000")
    swagger_template = SWAGGER_TEMPLATE.copy()
    swagger_template["host"] = host
    Swagger(app, config=SWAGGER_CONFIG, template=swagger_template)

    for bp in blueprints:
        app.register_blueprint(bp)
    register_commands(app)

    if app.config.get("UPLOAD_CLEANUP_ENABLED") and not app.config.get("TESTING"):
        init_scheduler(app)

    app.logger.info(
        f"App created ({app.config.get('ENV_NAME')}), "
        f"{len(list(app.url_map.iter_rules()))} routes registered"
    )
    return app


app = create_app()


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(
        host="0.0.0.0", port=port, debug=os.environ.get("FLASK_ENV") != "production"
    )
