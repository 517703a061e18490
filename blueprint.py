from index import main_bp
from routes.auth import auth_bp
from routes.weighing import weighing_bp
from routes.closing_period import period_bp
from routes.activity_log import log_bp


def blue_print(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(weighing_bp)
    app.register_blueprint(period_bp)
    app.register_blueprint(log_bp)
