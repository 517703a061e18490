from typing import Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.category import PlasticCategory


def list_categories() -> List[PlasticCategory]:
    return PlasticCategory.query.order_by(PlasticCategory.name.asc()).all()


def get_category(category_id: int) -> Optional[PlasticCategory]:
    return db.session.get(PlasticCategory, category_id)


def add_categories(names: Iterable[str]) -> List[PlasticCategory]:
    """Insert new categories; blanks and existing names are skipped."""
    existing = {
        n for (n,) in db.session.query(func.upper(PlasticCategory.name)).all()
    }
    created = []
    for raw in names:
        name = (raw or "").strip()
        if not name or name.upper() in existing:
            continue
        c = PlasticCategory(name=name)
        db.session.add(c)
        created.append(c)
        existing.add(name.upper())
    _commit()
    return created


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
