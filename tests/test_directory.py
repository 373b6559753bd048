from dashboard.db import SessionLocal
from dashboard.services import directory
from tests.utils.directory import CONTACT_COUNT, contact_id


def test_get_contact():
    with SessionLocal() as db:
        contact = directory.get_contact(db, contact_id(3))
        assert contact.last_name == "Last003"
        assert contact.agency_id == "a-1"
        assert directory.get_contact(db, "missing") is None


def test_contact_listing_order_is_stable():
    with SessionLocal() as db:
        first = directory.list_contacts(db, limit=5, offset=0)
        second = directory.list_contacts(db, limit=5, offset=5)
        assert [c.id for c in first + second] == [contact_id(i) for i in range(1, 11)]
        assert directory.count_contacts(db) == CONTACT_COUNT


def test_search_matches_full_name_case_insensitively():
    with SessionLocal() as db:
        rows = directory.list_contacts(db, limit=10, offset=0, search="first012 LAST012")
        assert [c.id for c in rows] == [contact_id(12)]
        assert directory.count_contacts(db, search="   ") == CONTACT_COUNT
        assert directory.count_contacts(db, search="_") == 0
