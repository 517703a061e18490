# seed.py
from configs import db
from dao import category as category_dao
from app import app

DEFAULT_CATEGORIES = [
    "PPS KOTOR",
    "PP KOTOR",
    "PP NILON",
    "PP TERASI",
    "PP SABLON",
    "PP ROTI",
    "METALIS",
    "METALIS ROLL",
    "SLITING",
    "LIT MINERAL",
    "LIT RASA",
]


def seed_categories(names=DEFAULT_CATEGORIES):
    created = category_dao.add_categories(names)
    print(f"✓ {len(created)} kategori plastik ditambahkan")
    return created


if __name__ == "__main__":
    with app.app_context():
        db.create_all()
        seed_categories()
