from tests.utils.auth import build_auth_headers


def test_list_agencies_sorted_by_name(client):
    resp = client.get("/api/agencies", headers=build_auth_headers())
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["total"] == 3
    assert [row["name"] for row in body["data"]] == [
        "Alpha Unified District",
        "Beta Supervisory Union",
        "Gamma Charter Schools",
    ]
    assert body["data"][0]["state_code"] == "VT"


def test_search_agencies(client):
    headers = build_auth_headers()

    body = client.get("/api/agencies?search=vermont", headers=headers).json()
    assert body["total"] == 2
    assert {row["id"] for row in body["data"]} == {"a-1", "a-2"}

    body = client.get("/api/agencies?search=YORK", headers=headers).json()
    assert [row["id"] for row in body["data"]] == ["a-3"]

    # wildcards in the search term are matched literally
    body = client.get("/api/agencies?search=%25", headers=headers).json()
    assert body == {"success": True, "data": [], "total": 0}


def test_agencies_paging(client):
    body = client.get("/api/agencies?page=2&limit=2", headers=build_auth_headers()).json()
    assert body["total"] == 3
    assert [row["id"] for row in body["data"]] == ["a-3"]


def test_get_agency(client):
    headers = build_auth_headers()
    resp = client.get("/api/agencies/a-2", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["county"] == "Orange"

    resp = client.get("/api/agencies/missing", headers=headers)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Agency not found"}


def test_agency_browsing_is_free(client):
    headers = build_auth_headers()
    client.get("/api/agencies", headers=headers)
    client.get("/api/agencies/a-1", headers=headers)
    stats = client.get("/api/user-stats", headers=headers).json()
    assert stats["viewedCount"] == 0
    assert stats["remaining"] == stats["limit"]
