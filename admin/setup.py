# admin/setup.py
from flask import redirect, url_for, request, flash
from flask_login import current_user, logout_user
from flask_admin import Admin, AdminIndexView, expose
from flask_admin.contrib.sqla import ModelView
from flask_admin.menu import MenuLink
from configs import db
from db.models.user import UserRole


class MyAdminIndex(AdminIndexView):
    @expose("/")
    def index(self):
        if not current_user.is_authenticated:
            return redirect(url_for("auth.login", next=request.url))

        if not current_user.has_role(UserRole.ADMIN):
            flash("Anda tidak memiliki akses ke halaman admin.", "danger")
            return redirect(url_for("main.home"))

        return super().index()

    @expose("/logout")
    def admin_logout(self):
        if current_user.is_authenticated:
            logout_user()
            flash("Anda telah logout", "success")
        return redirect(url_for("admin.index"))

    def is_accessible(self):
        return current_user.is_authenticated and current_user.has_role(UserRole.ADMIN)

    def inaccessible_callback(self, name, **kwargs):
        if not current_user.is_authenticated:
            return redirect(url_for("auth.login", next=request.url))
        flash("Anda tidak memiliki akses ke halaman admin.", "danger")
        return redirect(url_for("main.home"))


class SecureModelView(ModelView):
    can_view_details = True
    can_export = True

    def is_accessible(self):
        return current_user.is_authenticated and current_user.has_role(UserRole.ADMIN)

    def inaccessible_callback(self, name, **kwargs):
        return redirect(url_for("auth.login", next=request.url))


class UserView(SecureModelView):
    column_list = ["id", "username", "full_name", "role", "is_active", "last_login_at"]
    form_excluded_columns = ["password_hash", "last_login_at"]
    can_create = False  # passwords are set via seed_user.py


class CategoryView(SecureModelView):
    column_searchable_list = ["name"]
    column_default_sort = "name"
    form_columns = ["name"]


class ClosingPeriodView(SecureModelView):
    can_delete = False  # soft delete through is_active only
    column_list = ["id", "period_name", "start_date", "end_date", "is_active"]
    column_filters = ["is_active", "start_date", "end_date"]
    form_columns = ["period_name", "start_date", "end_date", "is_active"]


class WeighingSessionView(SecureModelView):
    column_searchable_list = ["pic_name", "owner_name"]
    column_filters = ["transaction_date", "pic_name", "owner_name"]
    column_list = ["transaction_date", "pic_name", "owner_name", "start_time", "end_time"]
    column_default_sort = ("transaction_date", True)
    form_columns = ["transaction_date", "pic_name", "owner_name", "gabungan", "start_time", "end_time"]
    can_delete = False  # see /history/<id>/delete


class DeletionLogView(SecureModelView):
    can_create = False
    can_edit = False
    can_delete = False
    column_default_sort = ("deleted_at", True)
    column_list = [
        "deleted_at",
        "deleted_session_id",
        "nama_penimbang",
        "pemilik_barang",
        "total_berat_kg",
        "user_agent",
    ]


def init_admin(app):
    admin = Admin(
        app,
        name="Penimbangan Admin",
        index_view=MyAdminIndex(url="/manage"),
        url="/manage",
    )
    from db.models.user import User
    from db.models.category import PlasticCategory
    from db.models.closing_period import ClosingPeriod
    from db.models.weighing import WeighingSession
    from db.models.activity_log import DeletionLog

    admin.add_view(UserView(User, db.session, category="System", endpoint="admin_user", name="Users"))
    admin.add_view(
        CategoryView(
            PlasticCategory,
            db.session,
            category="Master Data",
            endpoint="admin_category",
            name="Kategori Plastik",
        )
    )
    admin.add_view(
        ClosingPeriodView(
            ClosingPeriod,
            db.session,
            category="Master Data",
            endpoint="admin_period",
            name="Periode Tutup Buku",
        )
    )
    admin.add_view(
        WeighingSessionView(
            WeighingSession,
            db.session,
            category="Penimbangan",
            endpoint="admin_session",
            name="Sesi Penimbangan",
        )
    )
    admin.add_view(
        DeletionLogView(
            DeletionLog,
            db.session,
            category="Penimbangan",
            endpoint="admin_log",
            name="Log Aktivitas",
        )
    )
    admin.add_link(
        MenuLink(
            name="Logout",
            category="System",
            endpoint="admin.admin_logout",
        )
    )
    return admin
