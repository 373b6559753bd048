from tests.utils.auth import build_auth_headers
from tests.utils.directory import contact_id


def test_quota_metrics(client):
    headers = build_auth_headers()
    resp = client.post("/api/contacts/view", headers=headers, json={"contactId": contact_id(1)})
    assert resp.status_code == 200

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    body = metrics.text
    assert "contact_views_charged_total" in body
    assert "quota_reject_total" in body
    assert "quota_page_trimmed_total" in body
    assert "http_requests_total" in body
