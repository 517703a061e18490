# index.py
from datetime import datetime
from flask import Blueprint, jsonify, render_template
from flask_login import login_required
from dao import dashboard as dashboard_dao
from reports.charts import chart_segments

main_bp = Blueprint("main", __name__)


@main_bp.app_context_processor
def inject_now():
    return {"current_year": datetime.now().year}


@main_bp.route("/")
@login_required
def home():
    weekly = dashboard_dao.weekly_dashboard()
    return render_template(
        "index.html",
        weekly=weekly,
        segments=chart_segments(weekly.categories),
    )


@main_bp.route("/api/weekly.json")
@login_required
def weekly_json():
    weekly = dashboard_dao.weekly_dashboard()
    return jsonify(
        {
            "start_date": weekly.interval.start.isoformat(),
            "end_date": weekly.interval.end.isoformat(),
            "week_label": weekly.week_label,
            "this_week_total": weekly.this_week_total,
            "this_week_session_count": weekly.this_week_session_count,
            "categories": [
                {
                    "category_name": r.category_name,
                    "total_weight": r.total_weight,
                    "percentage": r.percentage,
                }
                for r in weekly.categories
            ],
            "segments": [s.to_dict() for s in chart_segments(weekly.categories)],
        }
    )
