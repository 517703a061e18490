import logging
from datetime import date
from io import BytesIO
from flask import Blueprint, render_template, request, redirect, url_for, flash, jsonify, send_file
from flask_login import login_required
from sqlalchemy.exc import SQLAlchemyError
from dao import closing_period as period_dao, dashboard as dashboard_dao
from reports.charts import chart_segments
from reports.pdf import ReportError, build_period_pdf, period_filename
from reports.periods import format_date_id
from utils.auth import admin_required

logger = logging.getLogger(__name__)

period_bp = Blueprint("period_web", __name__)


@period_bp.route("/periods")
@login_required
def periods_list():
    return render_template(
        "period/periods.html", periods=period_dao.list_available_periods()
    )


@period_bp.route("/periods/add", methods=["GET", "POST"])
@admin_required
def periods_add():
    if request.method == "POST":
        try:
            period_dao.create_period(
                period_name=request.form.get("period_name", ""),
                start_date=request.form.get("start_date"),
                end_date=request.form.get("end_date"),
            )
            flash("Periode berhasil ditambahkan", "success")
            return redirect(url_for("period_web.periods_list"))
        except ValueError as e:
            flash(str(e), "warning")
        except SQLAlchemyError:
            logger.exception("Error creating closing period")
            flash("Gagal menyimpan periode. Silakan coba lagi.", "danger")
    return render_template("period/period_form.html", action="add", period=None)


@period_bp.route("/periods/edit/<int:period_id>", methods=["GET", "POST"])
@admin_required
def periods_edit(period_id: int):
    p = period_dao.get_period(period_id)
    if not p:
        flash("Periode tidak ditemukan", "warning")
        return redirect(url_for("period_web.periods_list"))
    if request.method == "POST":
        try:
            period_dao.update_period(
                period_id,
                period_name=request.form.get("period_name", ""),
                start_date=request.form.get("start_date"),
                end_date=request.form.get("end_date"),
            )
            flash("Periode berhasil diperbarui", "success")
            return redirect(url_for("period_web.periods_list"))
        except ValueError as e:
            flash(str(e), "warning")
        except SQLAlchemyError:
            logger.exception("Error updating closing period %s", period_id)
            flash("Gagal menyimpan periode. Silakan coba lagi.", "danger")
    return render_template("period/period_form.html", action="edit", period=p)


@period_bp.route("/periods/deactivate/<int:period_id>", methods=["POST"])
@admin_required
def periods_deactivate(period_id: int):
    if period_dao.deactivate_period(period_id):
        flash("Periode dinonaktifkan", "success")
    else:
        flash("Periode tidak ditemukan", "warning")
    return redirect(url_for("period_web.periods_list"))


@period_bp.route("/periods/<int:period_id>/summary")
@login_required
def period_summary(period_id: int):
    report = dashboard_dao.period_report(period_id)
    if report is None:
        flash("Tidak ada data untuk periode ini", "info")
        return redirect(url_for("period_web.periods_list"))
    return render_template(
        "period/summary.html",
        report=report,
        segments=chart_segments(report.categories),
    )


@period_bp.route("/periods/<int:period_id>/chart.json")
@login_required
def period_chart(period_id: int):
    report = dashboard_dao.period_report(period_id)
    if report is None:
        return jsonify({"summary": None, "categories": [], "segments": []})
    summary = None
    if report.summary:
        summary = {
            "total_sessions": report.summary.total_sessions,
            "total_weight": report.summary.total_weight,
            "total_items": report.summary.total_items,
        }
    return jsonify(
        {
            "period_name": report.period.period_name,
            "start_date": report.interval.start.isoformat(),
            "end_date": report.interval.end.isoformat(),
            "summary": summary,
            "categories": [
                {
                    "category_name": c.category_name,
                    "total_weight": c.total_weight,
                    "percentage": c.percentage,
                    "item_count": c.item_count,
                }
                for c in report.categories
            ],
            "segments": [s.to_dict() for s in chart_segments(report.categories)],
        }
    )


@period_bp.route("/periods/<int:period_id>/pdf")
@login_required
def period_pdf(period_id: int):
    report = dashboard_dao.period_report(period_id)
    if report is None:
        flash("Tidak ada data untuk periode ini", "info")
        return redirect(url_for("period_web.periods_list"))

    p = report.period
    label = f"{p.period_name} ({format_date_id(p.start_date)} - {format_date_id(p.end_date)})"
    try:
        pdf = build_period_pdf(label, report.summary, report.categories, report.sessions)
    except ReportError as e:
        flash(str(e), "danger")
        return redirect(url_for("period_web.period_summary", period_id=period_id))
    return send_file(
        BytesIO(pdf),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=period_filename(p.period_name, p.start_date.year, date.today()),
    )
