# utils/auth.py
from functools import wraps
from flask import flash, redirect, url_for
from flask_login import current_user
from configs import login
from db.models.user import UserRole


def roles_required(*roles):
    """Like login_required, but the user must also hold one of `roles`."""

    def deco(fn):
        @wraps(fn)
        def inner(*a, **kw):
            if not current_user.is_authenticated:
                return login.unauthorized()
            if not current_user.has_role(*roles):
                flash("Anda tidak memiliki akses ke halaman ini.", "danger")
                return redirect(url_for("main.home"))
            return fn(*a, **kw)

        return inner

    return deco


admin_required = roles_required(UserRole.ADMIN)
