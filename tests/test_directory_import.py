import pytest
import sqlalchemy as sa

from dashboard.models import Agency, Base, Contact
from scripts import import_directory


def create_engine(tmp_path):
    engine = sa.create_engine(f"sqlite:///{tmp_path / 'directory.db'}")
    Base.metadata.create_all(engine)
    return engine


def agency_row(**overrides):
    row = {
        "ID": " ag-1 ",
        "Name": "Delta School District",
        "State": "Vermont",
        "State_Code": "VT",
        "County": "",
        "Unused Column": "ignored",
    }
    row.update(overrides)
    return row


def test_normalize_row_keeps_known_columns():
    row = import_directory.normalize_row(agency_row(), import_directory.AGENCY_COLUMNS)
    assert row["id"] == "ag-1"
    assert row["state_code"] == "VT"
    assert row["county"] is None
    assert row["website"] is None
    assert "unused column" not in row
    assert "created_at" not in row


def test_sync_inserts_then_updates(tmp_path):
    engine = create_engine(tmp_path)
    agencies = [import_directory.normalize_row(agency_row(), import_directory.AGENCY_COLUMNS)]
    contacts = [
        import_directory.normalize_row(
            {"id": "ct-1", "agency_id": "ag-1", "first_name": "Ada", "last_name": "Lovelace"},
            import_directory.CONTACT_COLUMNS,
        )
    ]

    stats = import_directory.sync_directory(agencies, contacts, engine)
    assert stats["agencies_inserted"] == 1
    assert stats["contacts_inserted"] == 1

    contacts[0]["title"] = "Principal"
    stats = import_directory.sync_directory(agencies, contacts, engine)
    assert stats["agencies_updated"] == 1
    assert stats["contacts_updated"] == 1

    with engine.connect() as conn:
        title = conn.execute(
            sa.select(Contact.__table__.c.title).where(Contact.__table__.c.id == "ct-1")
        ).scalar_one()
        assert title == "Principal"
        assert conn.execute(sa.select(sa.func.count()).select_from(Agency.__table__)).scalar_one() == 1


def test_sync_skips_incomplete_rows(tmp_path):
    engine = create_engine(tmp_path)
    agencies = [
        {"id": "ag-1", "name": "Delta"},
        {"id": None, "name": "No id"},
        {"id": "ag-2", "name": None},
    ]
    contacts = [
        {"id": "ct-1", "agency_id": "ag-1"},
        {"id": None, "agency_id": "ag-1"},
        {"id": "ct-2", "agency_id": "ag-missing"},
    ]
    stats = import_directory.sync_directory(agencies, contacts, engine)
    assert stats == {
        "agencies_inserted": 1,
        "agencies_updated": 0,
        "contacts_inserted": 1,
        "contacts_updated": 0,
        "skipped": 4,
    }


def test_load_rows_reads_csv(tmp_path):
    path = tmp_path / "agencies.csv"
    path.write_text("\ufeffid,name\nag-1,Delta\n", encoding="utf-8")
    assert import_directory.load_rows(path) == [{"id": "ag-1", "name": "Delta"}]

    bad = tmp_path / "agencies.json"
    bad.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported"):
        import_directory.load_rows(bad)
