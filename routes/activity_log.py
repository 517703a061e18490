import logging
from datetime import date
from flask import Blueprint, current_app, render_template, redirect, request, url_for, flash
from flask_login import login_required
from sqlalchemy.exc import SQLAlchemyError
from dao import activity_log as log_dao
from reports.periods import DateInterval, parse_date
from utils.auth import admin_required

logger = logging.getLogger(__name__)

log_bp = Blueprint("log_web", __name__)


@log_bp.route("/log-aktivitas")
@login_required
def logs_list():
    filters = {
        "start_date": request.args.get("start_date", ""),
        "end_date": request.args.get("end_date", ""),
    }
    start, end = parse_date(filters["start_date"]), parse_date(filters["end_date"])
    interval = None
    if start or end:
        interval = DateInterval(start or date.min, end or date.max)
    try:
        logs = log_dao.list_logs(interval)
    except SQLAlchemyError:
        logger.exception("Error fetching activity logs")
        flash("Gagal memuat log aktivitas", "danger")
        logs = []
    return render_template(
        "log/logs.html",
        logs=logs,
        filters=filters,
        device_of=log_dao.device_from_user_agent,
        retention_days=current_app.config["LOG_RETENTION_DAYS"],
    )


@log_bp.route("/log-aktivitas/cleanup", methods=["POST"])
@admin_required
def logs_cleanup():
    deleted, _ = log_dao.cleanup_old_logs(days=current_app.config["LOG_RETENTION_DAYS"])
    flash(f"{deleted} log lama dihapus", "success")
    return redirect(url_for("log_web.logs_list"))
