from decimal import Decimal

from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from _helper import apply_coupon, create_order, fulfill_order, normalize_spaces, pay_order
from order_service.config import Settings
from order_service.main import create_app


def test_health(client: TestClient):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_create_and_get(client: TestClient):
    status, body = create_order(client)
    assert status == 201
    assert body["id"] == 1
    assert body["customer_name"] == "Ana"
    assert Decimal(body["total"]) == Decimal("100.00")
    assert body["order_date"] == "2024-12-15"
    assert body["status"] == "NEW"
    assert body["status_description"] == "Novo"

    resp = client.get("/orders/1")
    assert resp.status_code == 200
    assert resp.json() == body


def test_get_missing_order_is_404(client: TestClient):
    resp = client.get("/orders/999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "not_found", "detail": "order 999 not found"}


def test_list_orders_in_id_order(client: TestClient):
    for name in ("Ana", "Bia", "Caio"):
        create_order(client, customer_name=name)
    resp = client.get("/orders")
    assert resp.status_code == 200
    assert [o["id"] for o in resp.json()] == [1, 2, 3]
    assert [o["customer_name"] for o in resp.json()] == ["Ana", "Bia", "Caio"]


def test_create_with_blank_name_is_400(client: TestClient):
    status, body = create_order(client, customer_name="", total="50", order_date="01-01-2024")
    assert status == 400
    assert body["error"] == "validation_error"


def test_create_with_zero_total_is_400(client: TestClient):
    status, body = create_order(client, total="0")
    assert status == 400
    assert body["error"] == "validation_error"


def test_create_with_bad_date_is_400(client: TestClient):
    status, body = create_order(client, order_date="2024-12-15")
    assert status == 400
    assert "dd-MM-yyyy" in body["detail"]


def test_create_with_missing_field_is_422(client: TestClient):
    resp = client.post("/orders", json={"customer_name": "Ana"})
    assert resp.status_code == 422


def test_full_coupon_and_free_fulfillment_flow(client: TestClient):
    create_order(client)

    status, body = apply_coupon(client, 1, "OFF10")
    assert status == 200
    assert Decimal(body["new_total"]) == Decimal("90.00")

    status, body = apply_coupon(client, 1, "VALOR200")
    assert status == 200
    assert Decimal(body["new_total"]) == Decimal("0")

    status, body = fulfill_order(client, 1)
    assert status == 200
    assert body["status"] == "FULFILLED"
    assert normalize_spaces(body["message"]) == "R$ 0,00 | Entregue"


def test_apply_coupon_unknown_order_is_404(client: TestClient):
    status, body = apply_coupon(client, 999, "OFF10")
    assert status == 404
    assert body["error"] == "not_found"


def test_invalid_coupon_is_400_with_token(client: TestClient):
    create_order(client)
    status, body = apply_coupon(client, 1, "BLACKFRIDAY")
    assert status == 400
    assert body["error"] == "invalid_coupon"
    assert "BLACKFRIDAY" in body["detail"]


def test_non_positive_order_id_is_422(client: TestClient):
    status, _ = apply_coupon(client, 0, "OFF10")
    assert status == 422
    status, _ = fulfill_order(client, -1)
    assert status == 422


def test_fulfill_unpaid_order_is_409(client: TestClient):
    create_order(client)
    status, body = fulfill_order(client, 1)
    assert status == 409
    assert body["error"] == "invalid_state"
    assert "NEW" in body["detail"]


def test_pay_then_fulfill(client: TestClient):
    create_order(client, total="59.90")
    status, body = pay_order(client, 1)
    assert status == 200
    assert body["status"] == "PAID"
    assert body["status_description"] == "Pago"

    status, body = fulfill_order(client, 1)
    assert status == 200
    assert normalize_spaces(body["message"]) == "R$ 59,90 | Entregue"

    status, body = pay_order(client, 1)
    assert status == 409


def test_admin_reset(client: TestClient):
    create_order(client)
    create_order(client)
    resp = client.post("/admin/reset")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "cleared": 2}
    assert client.get("/orders").json() == []
    _, body = create_order(client)
    assert body["id"] == 1


def test_each_app_has_its_own_store(client: TestClient):
    create_order(client)
    with TestClient(create_app()) as other:
        assert other.get("/orders").json() == []


def test_metrics_endpoint(client: TestClient):
    create_order(client)
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "orders_created_total" in resp.text
    assert "orders_in_store" in resp.text


def test_unexpected_error_is_generic_500(monkeypatch):
    app = create_app()
    with TestClient(app, raise_server_exceptions=False) as c:
        def broken():
            raise RuntimeError("store corrupted: secret detail")

        monkeypatch.setattr(app.state.order_service, "list_orders", broken)
        resp = c.get("/orders")
    assert resp.status_code == 500
    assert resp.json() == {"error": "internal_error", "detail": "internal error"}


def test_overlong_coupon_is_400(client: TestClient):
    create_order(client)
    status, body = apply_coupon(client, 1, "OFF" + "9" * 5000)
    assert status == 400
    assert body["error"] == "invalid_coupon"


def test_app_uses_configured_currency():
    settings = Settings(currency_locale="en_US", currency_code="USD")
    with TestClient(create_app(settings)) as c:
        create_order(c, total="10.00")
        pay_order(c, 1)
        status, body = fulfill_order(c, 1)
    assert status == 200
    assert body["message"] == "$10.00 | Entregue"


def test_orders_in_store_tracks_live_store(client: TestClient):
    create_order(client)
    create_order(client)
    assert REGISTRY.get_sample_value("orders_in_store") == 2
    client.post("/admin/reset")
    assert REGISTRY.get_sample_value("orders_in_store") == 0


def test_rejected_transition_is_counted(client: TestClient):
    labels = {"current_state": "NEW", "attempted_state": "FULFILLED"}
    before = REGISTRY.get_sample_value("orders_rejected_invalid_transition_total", labels) or 0.0
    create_order(client)
    fulfill_order(client, 1)
    assert REGISTRY.get_sample_value("orders_rejected_invalid_transition_total", labels) == before + 1
