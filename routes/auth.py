import logging
from datetime import datetime
from urllib.parse import urlparse
from flask import Blueprint, render_template, request, redirect, url_for, flash, session
from flask_login import login_user, logout_user, current_user
from configs import db
from db.models.user import User

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _safe_next(target):
    # only same-site relative paths
    if not target:
        return None
    parts = urlparse(target)
    if parts.scheme or parts.netloc:
        return None
    return target


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if current_user.is_authenticated:
        return redirect(url_for("main.home"))
    if request.method == "GET":
        return render_template("auth/login.html")

    session.pop("_flashes", None)
    username = request.form.get("username", "").strip()
    user = User.query.filter_by(username=username).first()

    if user is None or not user.check_password(request.form.get("password", "")):
        logger.warning("Failed login for %r", username)
        flash("Username atau password salah", "danger")
        return render_template("auth/login.html"), 401
    if not user.is_active:
        flash("Akun dinonaktifkan", "warning")
        return render_template("auth/login.html"), 403

    login_user(user, remember=True)
    user.last_login_at = datetime.utcnow()
    db.session.commit()
    flash(f"Selamat datang, {user}", "success")
    return redirect(_safe_next(request.args.get("next")) or url_for("main.home"))


@auth_bp.route("/logout")
def logout():
    if current_user.is_authenticated:
        logout_user()
        session.pop("_flashes", None)
        flash("Anda telah logout", "info")
    return redirect(url_for("auth.login"))
