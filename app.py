import logging
import os

import click
from dotenv import load_dotenv
from flask import Flask

from configs import db, login
from db.models.user import User, UserRole
from blueprint import blue_print
from admin.setup import init_admin

load_dotenv()


def create_app(test_config=None):
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.secret_key = os.getenv("SECRET_KEY", "dev_secret")
    app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv(
        "DATABASE_URL", "sqlite:///penimbangan.db"
    )
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["LOG_RETENTION_DAYS"] = int(os.getenv("LOG_RETENTION_DAYS", "7"))
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db.init_app(app)
    login.init_app(app)
    login.login_view = "auth.login"
    login.login_message = "Silakan login terlebih dahulu."

    @app.context_processor
    def inject_enums():
        return dict(UserRole=UserRole)

    init_admin(app)  # /manage
    blue_print(app)
    _register_commands(app)
    return app


@login.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


def _register_commands(app):
    @app.cli.command("init-db")
    def init_db_command():
        """Create all tables."""
        db.create_all()
        click.echo("Database initialized.")

    @app.cli.command("cleanup-logs")
    @click.option("--days", type=int, default=None, help="Retention window in days.")
    def cleanup_logs_command(days):
        """Delete deletion-log entries older than the retention window."""
        from dao import activity_log as log_dao

        days = days or app.config["LOG_RETENTION_DAYS"]
        deleted, oldest = log_dao.cleanup_old_logs(days=days)
        click.echo(f"Deleted {deleted} log(s); oldest remaining: {oldest or '-'}")


app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5000)
