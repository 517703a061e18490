from datetime import datetime
from configs import db


class PlasticCategory(db.Model):
    __tablename__ = "plastic_categories"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<PlasticCategory {self.name}>"

    def __str__(self):
        return self.name
