import logging
import os
import sys

from dotenv import load_dotenv
from flask import Flask, jsonify

load_dotenv()

from config import Config  # noqa: E402  (load_dotenv needs to run first)
from errors import register_error_handlers  # noqa: E402
from extensions import db, login_manager  # noqa: E402  (load_dotenv needs to run first)

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def configure_logging(app: Flask) -> None:
    """Root logger setup; module loggers propagate to it."""

    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(stream=sys.stderr, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    logging.getLogger().setLevel(level)


def create_app(config_object=Config, **overrides) -> Flask:
    """Application factory for the weighbridge API."""

    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config.update(overrides)

    configure_logging(app)

    # init extensions
    db.init_app(app)
    login_manager.init_app(app)

    register_error_handlers(app)

    # blueprints
    from modules.auth import bp as auth_bp
    from modules.suppliers import bp as suppliers_bp
    from modules.weighings import bp as weighings_bp
    from modules.stats import bp as stats_bp
    from modules.export import bp as export_bp
    from modules.uploads import bp as uploads_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(suppliers_bp)
    app.register_blueprint(weighings_bp)
    app.register_blueprint(stats_bp)
    app.register_blueprint(export_bp)
    app.register_blueprint(uploads_bp)

    @app.route("/api/health")
    def health():
        return jsonify(ok=True)

    # DB
    with app.app_context():
        # Важно: модели должны быть импортированы до create_all()
        import models  # noqa: F401
        from modules.suppliers import models as suppliers_models  # noqa: F401
        from modules.weighings import models as weighings_models  # noqa: F401

        db.create_all()

    # uploads dir
    os.makedirs(app.config.get("UPLOAD_FOLDER", "uploads"), exist_ok=True)

    app.logger.info("Weighbridge API initialised (db=%s)", app.config["SQLALCHEMY_DATABASE_URI"])
    return app

if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "4000")), debug=True)
