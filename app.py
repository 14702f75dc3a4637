import os
import logging
from flask import Flask, jsonify
from flask_cors import CORS
from flask_login import LoginManager
from werkzeug.middleware.proxy_fix import ProxyFix
from werkzeug.security import generate_password_hash
from dotenv import load_dotenv

# Import database instance
from database import db


def create_app(test_config=None):
    load_dotenv()

    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())

    app = Flask(__name__)
    # External systems (the workflow engine, the SPA front-end) call the
    # /api/* namespace cross-origin.
    CORS(app, resources={r"/api/*": {"origins": os.environ.get("ALLOWED_ORIGINS", "*")}},
         supports_credentials=True)
    app.secret_key = os.environ.get("SESSION_SECRET", "dev-secret-key-change-in-production")
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

    # Configure the database
    app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("DATABASE_URL", "sqlite:///recruitment.db")
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
        "pool_recycle": 300,
        "pool_pre_ping": True,
    }
    app.config["MAX_CONTENT_LENGTH"] = 16 * 1024 * 1024  # 16MB, resumes travel base64 encoded
    app.config["ADMIN_USERNAME"] = os.environ.get("ADMIN_USERNAME", "admin")
    app.config["ADMIN_PASSWORD"] = os.environ.get("ADMIN_PASSWORD", "admin123")
    app.config["ADMIN_EMAIL"] = os.environ.get("ADMIN_EMAIL", "admin@easyhrtools.com")

    if test_config:
        app.config.update(test_config)

    # Initialize extensions
    db.init_app(app)
    login_manager = LoginManager()
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        from models import User
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'success': False, 'error': 'Authentication required'}), 401

    from workflow_client import WorkflowClient
    app.extensions['workflow_client'] = app.config.get('WORKFLOW_CLIENT') or WorkflowClient()

    # Import routes and register them with the app
    from routes import register_routes
    register_routes(app)

    with app.app_context():
        # Import models to create tables
        import models  # noqa: F401

        db.create_all()
        _seed_defaults(app)

    return app


def _seed_defaults(app):
    from models import User, UserRole
    from recruitment_service import ensure_default_template

    username = app.config["ADMIN_USERNAME"]
    if not User.query.filter_by(username=username).first():
        admin_user = User(
            username=username,
            email=app.config["ADMIN_EMAIL"],
            password_hash=generate_password_hash(app.config["ADMIN_PASSWORD"]),
            role=UserRole.ADMIN,
        )
        db.session.add(admin_user)
        db.session.commit()
        logging.info(f"Default admin user created: {username}")

    ensure_default_template()
