import logging

from flask import Flask, redirect, request, url_for
from flask_wtf.csrf import generate_csrf

from config import Config
from utils.extensions import db, login_manager, migrate, csrf
from models import Admin


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    logging.getLogger('utils').setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    login_manager.init_app(app)

    # Import blueprints after extensions are bound
    from admin_routes import admin_bp
    app.register_blueprint(admin_bp, url_prefix="/admin")

    @app.context_processor
    def csrf_context():
        return dict(csrf_token=generate_csrf)

    @app.after_request
    def set_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        return response

    @app.route('/')
    def home():
        return redirect(url_for('admin.rollover'))

    with app.app_context():
        db.create_all()
        seed_super_admin(app)

    return app


@login_manager.unauthorized_handler
def unauthorized_callback():
    return redirect(url_for("admin.admin_login", next=request.path))


@login_manager.user_loader
def load_user(user_id):
    if user_id.startswith("admin:"):
        return Admin.query.filter_by(admin_id=user_id.split(":", 1)[1]).first()
    return None


def seed_super_admin(app):
    super_admin = Admin.query.filter_by(username=app.config['SUPERADMIN_USERNAME']).first()
    if not super_admin:
        admin = Admin(
            username=app.config['SUPERADMIN_USERNAME'],
            admin_id=app.config['SUPERADMIN_ID'],
            school_id=app.config['DEFAULT_SCHOOL_ID'],
        )
        admin.set_password(app.config['SUPERADMIN_PASSWORD'])
        db.session.add(admin)
        db.session.commit()
        app.logger.info("SuperAdmin created.")


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=False)
