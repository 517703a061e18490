import logging
from datetime import datetime
from io import BytesIO
from flask import Blueprint, render_template, request, redirect, url_for, flash, send_file
from flask_login import login_required
from sqlalchemy.exc import SQLAlchemyError
from dao import category as category_dao, weighing as weighing_dao
from db.models.weighing import SATUAN_VALUES
from reports.aggregation import format_duration
from reports.history import group_sessions
from reports.pdf import ReportError, build_session_pdf, session_filename

logger = logging.getLogger(__name__)

weighing_bp = Blueprint("weighing_web", __name__)


@weighing_bp.route("/input", methods=["GET", "POST"])
@login_required
def session_add():
    if request.method == "POST":
        try:
            weighing_dao.create_session(
                transaction_date=request.form.get("transaction_date"),
                pic_name=request.form.get("pic_name", ""),
                owner_name=request.form.get("owner_name", ""),
                gabungan=request.form.get("gabungan"),
                selected_category_ids=request.form.getlist("selected_categories"),
                items=_extract_items(request),
                start_time=_parse_timestamp(request.form.get("start_time")),
            )
            flash("Data berhasil disimpan!", "success")
            return redirect(url_for("weighing_web.session_add"))
        except ValueError as e:
            flash(str(e), "warning")
        except SQLAlchemyError:
            logger.exception("Error submitting weighing session")
            flash("Gagal menyimpan data. Silakan coba lagi.", "danger")

    return render_template(
        "weighing/input.html",
        categories=category_dao.list_categories(),
        satuan_values=SATUAN_VALUES,
        form=request.form,
    )


@weighing_bp.route("/history")
@login_required
def history():
    filters = {
        "start_date": request.args.get("start_date", ""),
        "end_date": request.args.get("end_date", ""),
        "pic_name": request.args.get("pic_name", ""),
        "owner_name": request.args.get("owner_name", ""),
    }
    try:
        sessions = weighing_dao.list_session_summaries(**filters)
    except SQLAlchemyError:
        logger.exception("Error fetching sessions")
        flash("Gagal memuat riwayat penimbangan.", "danger")
        sessions = []
    return render_template(
        "weighing/history.html",
        groups=group_sessions(sessions),
        total=len(sessions),
        filters=filters,
    )


@weighing_bp.route("/history/<session_id>")
@login_required
def session_detail(session_id: str):
    summary = weighing_dao.get_session_summary(session_id)
    if not summary:
        flash("Data session tidak ditemukan", "warning")
        return redirect(url_for("weighing_web.history"))
    return render_template(
        "weighing/detail.html",
        s=summary,
        duration=format_duration(summary.elapsed) if summary.elapsed else None,
    )


@weighing_bp.route("/history/<session_id>/edit", methods=["GET", "POST"])
@login_required
def session_edit(session_id: str):
    s = weighing_dao.get_session(session_id)
    if not s:
        flash("Data session tidak ditemukan", "warning")
        return redirect(url_for("weighing_web.history"))

    if request.method == "POST":
        try:
            weighing_dao.update_session_with_items(
                session_id,
                {
                    "transaction_date": request.form.get("transaction_date"),
                    "pic_name": request.form.get("pic_name", ""),
                    "owner_name": request.form.get("owner_name", ""),
                },
                items=_extract_items(request, with_id=True),
                new_item={
                    "category_id": request.form.get("new_category_id"),
                    "weight_kg": request.form.get("new_weight_kg"),
                    "satuan": request.form.get("new_satuan", ""),
                },
            )
            flash("Data berhasil diperbarui", "success")
            return redirect(url_for("weighing_web.session_detail", session_id=session_id))
        except ValueError as e:
            flash(str(e), "warning")
        except SQLAlchemyError:
            logger.exception("Error updating session %s", session_id)
            flash("Gagal memperbarui data. Silakan coba lagi.", "danger")

    return render_template(
        "weighing/edit.html",
        s=s,
        categories=category_dao.list_categories(),
        satuan_values=SATUAN_VALUES,
    )


@weighing_bp.route("/history/<session_id>/delete", methods=["POST"])
@login_required
def session_delete(session_id: str):
    try:
        ok = weighing_dao.delete_session(session_id, user_agent=request.user_agent.string)
    except SQLAlchemyError:
        logger.exception("Error deleting session %s", session_id)
        flash("Gagal menghapus data. Silakan coba lagi.", "danger")
        return redirect(url_for("weighing_web.history"))
    if not ok:
        flash("Data session tidak ditemukan", "warning")
    else:
        flash("Data berhasil dihapus", "success")
    return redirect(url_for("weighing_web.history"))


@weighing_bp.route("/items/<int:item_id>/delete", methods=["POST"])
@login_required
def item_delete(item_id: int):
    session_id = request.form.get("session_id")
    try:
        ok = weighing_dao.delete_item(item_id)
    except SQLAlchemyError:
        logger.exception("Error deleting item %s", item_id)
        ok = False
    flash("Item dihapus" if ok else "Gagal menghapus item", "success" if ok else "warning")
    if session_id:
        return redirect(url_for("weighing_web.session_edit", session_id=session_id))
    return redirect(url_for("weighing_web.history"))


@weighing_bp.route("/history/<session_id>/pdf")
@login_required
def session_pdf(session_id: str):
    summary = weighing_dao.get_session_summary(session_id)
    if not summary:
        flash("Data session tidak ditemukan", "warning")
        return redirect(url_for("weighing_web.history"))
    try:
        pdf = build_session_pdf(summary)
    except ReportError as e:
        flash(str(e), "danger")
        return redirect(url_for("weighing_web.session_detail", session_id=session_id))
    return send_file(
        BytesIO(pdf),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=session_filename(summary.id),
    )


# ---------- helpers ----------
def _extract_items(req, with_id: bool = False):
    """items[<i>][category_id|weight_kg|satuan] -> list ordered by <i>."""
    rows = {}
    for key in req.form:
        if key.startswith("items[") and key.endswith("][weight_kg]"):
            idx = key.split("[")[1].split("]")[0]
            try:
                order = int(idx)
            except ValueError:
                continue
            rows[order] = {
                "id": req.form.get(f"items[{idx}][id]"),
                "category_id": req.form.get(f"items[{idx}][category_id]"),
                "weight_kg": req.form.get(f"items[{idx}][weight_kg]"),
                "satuan": req.form.get(f"items[{idx}][satuan]", ""),
            }
    items = [rows[k] for k in sorted(rows)]
    if with_id:
        return [it for it in items if (it["id"] or "").isdigit()]
    for it in items:
        it.pop("id")
    return items


def _parse_timestamp(value):
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        return None
