import click
from flask import Flask
from flask_migrate import Migrate
from sqlalchemy import inspect

from config import Config
from routes import health_bp, auth_bp, booking_bp, admin_bp, audit_bp
from models import db
from models.user import User, Role
from utils.seed import seed_roles, seed_pricing
from utils.auth_context import load_current_user
from security.csrf import protect_request


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(audit_bp)

    db.init_app(app)
    Migrate(app, db)

    # Tables are owned by the migrations; tests set CREATE_TABLES instead.
    # Seeding waits until `flask db upgrade` has created the schema.
    with app.app_context():
        if app.config.get("CREATE_TABLES"):
            db.create_all()
        if inspect(db.engine).has_table("pricing"):
            seed_roles()
            seed_pricing()

    @app.before_request
    def _load_user():
        load_current_user()

    app.before_request(protect_request)

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app


def register_cli(app):
    @app.cli.command("make-admin")
    @click.argument("email")
    def make_admin(email):
        """Give a user full back-office access (SUPER_ADMIN)."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return

        role = Role.query.filter_by(name="SUPER_ADMIN").first()
        if not role:
            role = Role(name="SUPER_ADMIN")
            db.session.add(role)

        if role not in user.roles:
            user.roles.append(role)
        db.session.commit()

        click.echo(f"{user.email} promoted to SUPER_ADMIN")

    @app.cli.command("seed-pricing")
    def seed_pricing_command():
        """Create missing hourly pricing rows."""
        created = seed_pricing()
        click.echo(f"{created} pricing rows created")


if __name__ == "__main__":
    app = create_app()
    app.run(host="127.0.0.1", port=5002)
