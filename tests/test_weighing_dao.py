from datetime import date

import pytest

from configs import db
from dao import activity_log as log_dao
from dao import weighing as weighing_dao
from db.models.weighing import WeighingItem, WeighingSession


def _create(categories, d="2025-12-03", items=None, pic="Budi", owner="Toko A"):
    pp = categories["PP KOTOR"].id
    met = categories["METALIS"].id
    items = items or [
        {"category_id": pp, "weight_kg": "1.5", "satuan": "sak"},
        {"category_id": met, "weight_kg": "2.5", "satuan": ""},
    ]
    return weighing_dao.create_session(
        transaction_date=d,
        pic_name=pic,
        owner_name=owner,
        selected_category_ids=[pp, met],
        items=items,
    )


def test_create_session_numbers_items(categories):
    s = _create(categories)
    stored = weighing_dao.get_session(s.id)

    assert stored.transaction_date == date(2025, 12, 3)
    assert [it.sequence_number for it in stored.items] == [1, 2]
    assert stored.items[0].satuan == "SAK"
    assert stored.total_weight == pytest.approx(4.0)
    assert stored.end_time is not None


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"transaction_date": ""}, "Tanggal harus diisi"),
        ({"pic_name": "  "}, "Nama penimbang harus diisi"),
        ({"owner_name": ""}, "Nama pemilik harus diisi"),
        ({"selected_category_ids": []}, "Pilih minimal satu kategori plastik"),
        ({"items": []}, "Tambah minimal satu item penimbangan"),
        ({"items": [{"category_id": "", "weight_kg": 1}]}, "Pilih jenis plastik untuk semua item"),
        ({"items": [{"category_id": 1, "weight_kg": "0"}]}, "Berat harus lebih dari 0"),
        ({"items": [{"category_id": 1, "weight_kg": 1, "satuan": "KARUNG"}]}, "Satuan tidak valid"),
    ],
)
def test_validation_errors(app, kwargs, message):
    data = {
        "transaction_date": "2025-12-03",
        "pic_name": "Budi",
        "owner_name": "Toko A",
        "selected_category_ids": [1],
        "items": [{"category_id": 1, "weight_kg": 1}],
    }
    data.update(kwargs)
    with pytest.raises(ValueError, match=message):
        weighing_dao.create_session(**data)
    assert WeighingSession.query.count() == 0


def test_delete_session_writes_one_log(categories):
    s = _create(categories)
    sid = s.id

    assert weighing_dao.delete_session(sid, user_agent="Mozilla/5.0 (Linux; Android 14) Mobile")

    logs = log_dao.list_logs()
    assert len(logs) == 1
    assert logs[0].deleted_session_id == sid
    assert logs[0].nama_penimbang == "Budi"
    assert logs[0].pemilik_barang == "Toko A"
    assert logs[0].total_berat_kg == pytest.approx(4.0)
    assert weighing_dao.get_session(sid) is None
    assert WeighingItem.query.count() == 0

    # already gone: no second log
    assert weighing_dao.delete_session(sid) is False
    assert len(log_dao.list_logs()) == 1


def test_delete_proceeds_when_log_write_fails(categories, monkeypatch):
    from sqlalchemy.exc import SQLAlchemyError

    s = _create(categories)

    def boom(*a, **kw):
        raise SQLAlchemyError("log table unavailable")

    monkeypatch.setattr(log_dao, "write_deletion_log", boom)
    assert weighing_dao.delete_session(s.id)
    assert weighing_dao.get_session(s.id) is None


def test_update_and_add_items(categories):
    s = _create(categories)
    first = s.items[0]

    weighing_dao.update_item(first.id, weight_kg="3", satuan="press")
    added = weighing_dao.add_item(s.id, categories["SLITING"].id, 1.25, "BAL")
    weighing_dao.update_session(s.id, pic_name="Sari", transaction_date="2025-12-04")

    stored = weighing_dao.get_session(s.id)
    assert added.sequence_number == 3
    assert stored.pic_name == "Sari"
    assert stored.transaction_date == date(2025, 12, 4)
    assert stored.items[0].weight_kg == pytest.approx(3)
    assert stored.items[0].satuan == "PRESS"
    assert stored.total_weight == pytest.approx(6.75)


def test_update_rejects_bad_values(categories):
    s = _create(categories)
    with pytest.raises(ValueError):
        weighing_dao.update_item(s.items[0].id, weight_kg=0)
    with pytest.raises(ValueError):
        weighing_dao.update_session(s.id, owner_name=" ")
    with pytest.raises(ValueError):
        weighing_dao.update_session(s.id, id="other")


def test_delete_item(categories):
    s = _create(categories)
    assert weighing_dao.delete_item(s.items[0].id)
    assert weighing_dao.delete_item(999) is False
    assert len(weighing_dao.get_session(s.id).items) == 1


def test_list_session_summaries_filters(categories):
    _create(categories, d="2025-12-01", pic="Budi", owner="Toko A")
    _create(categories, d="2025-12-10", pic="Sari", owner="Toko B")
    _create(categories, d="2026-01-05", pic="budiman", owner="Toko C")

    everything = weighing_dao.list_session_summaries()
    assert [s.transaction_date for s in everything] == [
        date(2026, 1, 5),
        date(2025, 12, 10),
        date(2025, 12, 1),
    ]
    assert len(weighing_dao.list_session_summaries(pic_name="budi")) == 2
    assert len(weighing_dao.list_session_summaries(owner_name="toko b")) == 1
    dec = weighing_dao.list_session_summaries(start_date="2025-12-01", end_date="2025-12-31")
    assert len(dec) == 2
    assert weighing_dao.count_sessions_between(date(2025, 12, 1), date(2025, 12, 31)) == 2


def test_edit_is_all_or_nothing(categories):
    s = _create(categories)
    first, second = s.items

    with pytest.raises(ValueError, match="Berat harus lebih dari 0"):
        weighing_dao.update_session_with_items(
            s.id,
            {"transaction_date": "2025-12-04", "pic_name": "Sari", "owner_name": "Toko A"},
            items=[
                {"id": str(first.id), "category_id": first.category_id, "weight_kg": "9", "satuan": ""},
                {"id": str(second.id), "category_id": second.category_id, "weight_kg": "0", "satuan": ""},
            ],
        )

    db.session.expire_all()
    stored = weighing_dao.get_session(s.id)
    assert stored.pic_name == "Budi"
    assert stored.transaction_date == date(2025, 12, 3)
    assert [it.weight_kg for it in stored.items] == [1.5, 2.5]


def test_edit_rejects_bad_new_row_before_saving(categories):
    s = _create(categories)
    with pytest.raises(ValueError, match="Pilih jenis plastik"):
        weighing_dao.update_session_with_items(
            s.id,
            {"pic_name": "Sari"},
            new_item={"category_id": "", "weight_kg": "2", "satuan": ""},
        )
    db.session.expire_all()
    stored = weighing_dao.get_session(s.id)
    assert stored.pic_name == "Budi"
    assert len(stored.items) == 2


def test_edit_applies_header_items_and_new_row(categories):
    s = _create(categories)
    first = s.items[0]
    other = _create(categories, d="2025-12-05")

    weighing_dao.update_session_with_items(
        s.id,
        {"pic_name": "Sari"},
        items=[
            {"id": str(first.id), "weight_kg": "3", "satuan": "bal"},
            # row of another session is ignored
            {"id": str(other.items[0].id), "weight_kg": "99"},
        ],
        new_item={"category_id": categories["SLITING"].id, "weight_kg": "1", "satuan": ""},
    )

    stored = weighing_dao.get_session(s.id)
    assert stored.pic_name == "Sari"
    assert [it.weight_kg for it in stored.items] == [3.0, 2.5, 1.0]
    assert [it.sequence_number for it in stored.items] == [1, 2, 3]
    assert stored.items[0].satuan == "BAL"
    assert stored.items[2].category.name == "SLITING"
    assert weighing_dao.get_session(other.id).items[0].weight_kg == 1.5


def test_unknown_category_is_rejected_on_edit(categories):
    s = _create(categories)
    with pytest.raises(ValueError, match="Jenis plastik tidak ditemukan"):
        weighing_dao.update_item(s.items[0].id, category_id=999)
