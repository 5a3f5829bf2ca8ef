import logging

from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException

from config import Config
from routes import health_bp, auth_bp, admin_bp, booking_bp, schedule_bp, plans_bp

from models import db
from flask_migrate import Migrate
from services.errors import BookingError
from utils.auth_context import load_current_user
from security.csrf import csrf_protect


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(schedule_bp)
    app.register_blueprint(plans_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    app.before_request(load_current_user)
    app.before_request(csrf_protect)

    @app.errorhandler(BookingError)
    def _booking_error(err):
        return jsonify(error=err.message), err.status_code

    @app.errorhandler(HTTPException)
    def _http_error(err):
        return jsonify(error=err.description), err.code

    @app.errorhandler(Exception)
    def _unexpected_error(err):
        db.session.rollback()
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify(error="Something went wrong"), 500

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

#-------------------------
from datetime import datetime

import click
from models.user import User
from services.errors import NotFound
from services.memberships import assign_membership, seed_plans

def register_cli(app):
    @app.cli.command("make-admin")
    @click.argument("email")
    def make_admin(email):
        """Promote a user to admin by email (bootstrap)."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return

        if not user.has_role("admin"):
            user.role = "admin"
            db.session.commit()

        click.echo(f"{user.email} promoted to admin")

    @app.cli.command("seed-plans")
    def seed_plans_command():
        """Insert the default membership plan catalogue (idempotent)."""
        added = seed_plans()
        click.echo(f"Added {added} membership plans")

    @app.cli.command("assign-membership")
    @click.argument("email")
    @click.argument("plan_id", type=int)
    @click.option("--starts-at", type=click.DateTime(), default=None, help="Defaults to now")
    def assign_membership_command(email, plan_id, starts_at):
        """Give a member an active membership on the given plan."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return
        try:
            membership = assign_membership(user.id, plan_id, starts_at or datetime.now())
        except NotFound as err:
            click.echo(err.message)
            return
        click.echo(f"Membership {membership.id} assigned to {user.email}")

#-------------------------




if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
