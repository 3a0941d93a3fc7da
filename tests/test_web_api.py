import http.client
import json
import threading

import pytest

from finance_visualizer import web


@pytest.fixture
def api(tmp_path):
    server = web.make_server(str(tmp_path / "api.db"), "127.0.0.1", 0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server.server_address
    server.shutdown()
    server.server_close()


def _request(address, method, path="/api/transactions", body=None, raw=None):
    conn = http.client.HTTPConnection(*address, timeout=5)
    headers = {}
    data = raw
    if body is not None:
        data = json.dumps(body).encode("utf-8")
    if data is not None:
        headers["Content-Type"] = "application/json"
    conn.request(method, path, body=data, headers=headers)
    resp = conn.getresponse()
    payload = resp.read()
    conn.close()
    parsed = json.loads(payload) if payload and resp.getheader("Content-Type") == "application/json" else payload
    return resp, parsed


def _new(amount=100, date="2024-01-05", description="Groceries", category="Food"):
    return {"amount": amount, "date": date, "description": description, "category": category}


def test_crud_round(api):
    resp, created = _request(api, "POST", body=_new())
    assert resp.status == 201
    assert set(created) == {"id", "amount", "date", "description", "category"}
    assert created["amount"] == 100
    assert created["date"] == "2024-01-05"

    resp, listed = _request(api, "GET")
    assert resp.status == 200
    assert listed == [created]

    replacement = dict(_new(amount=0, date="2024-02-01", description="Refund", category="Other"), id=created["id"])
    resp, updated = _request(api, "PUT", body=replacement)
    assert resp.status == 200
    assert updated == replacement

    resp, listed = _request(api, "GET")
    assert listed == [replacement]

    resp, body = _request(api, "DELETE", body={"id": created["id"]})
    assert resp.status == 204
    assert body == b""

    resp, listed = _request(api, "GET")
    assert listed == []


def test_list_is_sorted_newest_first(api):
    _request(api, "POST", body=_new(date="2024-01-05"))
    _request(api, "POST", body=_new(date="2024-03-01"))
    _request(api, "POST", body=_new(date="2024-02-10"))

    _, listed = _request(api, "GET")
    assert [tx["date"] for tx in listed] == ["2024-03-01", "2024-02-10", "2024-01-05"]
    _, again = _request(api, "GET")
    assert again == listed


def test_post_missing_field_is_400_and_not_stored(api):
    body = _new()
    del body["description"]
    resp, payload = _request(api, "POST", body=body)
    assert resp.status == 400
    assert payload["error"] == "All fields are required"
    assert payload["fields"] == ["description"]

    _, listed = _request(api, "GET")
    assert listed == []


def test_malformed_json_is_400(api):
    resp, payload = _request(api, "POST", raw=b"{not json")
    assert resp.status == 400
    assert payload == {"error": "Invalid JSON body"}

    resp, payload = _request(api, "POST", raw=b"[1, 2]")
    assert resp.status == 400


def test_amount_too_large_for_a_float_is_400(api):
    raw = b'{"amount": 1' + b"0" * 400 + b', "date": "2024-01-05", "description": "x", "category": "Food"}'
    resp, payload = _request(api, "POST", raw=raw)
    assert resp.status == 400
    assert payload["fields"] == ["amount"]

    resp, payload = _request(api, "GET")
    assert payload == []


def test_non_numeric_content_length_is_400(api):
    conn = http.client.HTTPConnection(*api, timeout=5)
    conn.putrequest("POST", "/api/transactions")
    conn.putheader("Content-Length", "abc")
    conn.endheaders()
    resp = conn.getresponse()
    payload = json.loads(resp.read())
    conn.close()
    assert resp.status == 400
    assert payload == {"error": "Invalid Content-Length header"}


def test_put_missing_field_and_unknown_id(api):
    _, created = _request(api, "POST", body=_new())

    resp, payload = _request(api, "PUT", body={"id": created["id"], "amount": 5})
    assert resp.status == 400

    resp, payload = _request(api, "PUT", body=dict(_new(), id="does-not-exist"))
    assert resp.status == 404
    assert payload == {"error": "Transaction not found"}


def test_delete_unknown_or_missing_id_is_noop(api):
    _, created = _request(api, "POST", body=_new())

    resp, _ = _request(api, "DELETE", body={"id": "nope"})
    assert resp.status == 204
    resp, _ = _request(api, "DELETE")
    assert resp.status == 204

    _, listed = _request(api, "GET")
    assert listed == [created]


@pytest.mark.parametrize("method", ["PATCH", "OPTIONS"])
def test_other_methods_are_405_with_allow_header(api, method):
    resp, body = _request(api, method)
    assert resp.status == 405
    assert resp.getheader("Allow") == "GET, POST, DELETE, PUT"
    assert body == f"Method {method} Not Allowed".encode("utf-8")


def test_summary_and_categories(api):
    _request(api, "POST", body=_new(amount=100, date="2024-01-05"))
    _request(api, "POST", body=_new(amount=50, date="2024-01-20"))
    _request(api, "POST", body=_new(amount=30, date="2024-02-01", category="Transport"))

    resp, summary = _request(api, "GET", "/api/summary")
    assert resp.status == 200
    assert summary["total"] == 180
    assert summary["monthly"] == [
        {"month": "2024-01", "total": 150},
        {"month": "2024-02", "total": 30},
    ]
    assert summary["top_category"] == {"category": "Food", "total": 150}
    assert summary["most_recent"]["date"] == "2024-02-01"

    resp, categories = _request(api, "GET", "/api/categories")
    assert resp.status == 200
    assert categories[0] == {"label": "Food", "color": "#6366f1"}


def test_unknown_path_is_404(api):
    resp, payload = _request(api, "GET", "/api/nothing")
    assert resp.status == 404
    resp, payload = _request(api, "POST", "/api/nothing", body=_new())
    assert resp.status == 404


def test_store_failure_is_500(tmp_path):
    broken = tmp_path / "broken.db"
    broken.mkdir()
    server = web.make_server(str(broken), "127.0.0.1", 0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        resp, payload = _request(server.server_address, "GET")
        assert resp.status == 500
        assert payload == {"error": "Failed to fetch transactions"}
    finally:
        server.shutdown()
        server.server_close()
