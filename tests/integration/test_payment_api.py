import pytest
from sqlalchemy.exc import OperationalError

from donations import main as main_module
from donations.gateway.errors import StoreUnavailableError
from donations.services.payment_store import PaymentStore

CALLBACK_URL = "/api/payment/callback"


class TestCallbackEndpoint:
    def test_successful_payment(self, client, campaign, pending_payment, signed_callback):
        resp = client.get(CALLBACK_URL, params=signed_callback())

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "success"
        assert body["title"] == "Payment Successful!"
        assert body["amount_display"] == "₨500"
        assert body["transaction_id"] == "240115482913"
        assert body["txn_datetime"] == "January 15, 2024 02:30:00 PM"
        assert body["support_notice"] is None

        status = client.get(f"/api/payment/{pending_payment.txn_ref}").json()
        assert status["status"] == "completed"
        assert status["completion_txn_id"] == "240115482913"

        campaign_body = client.get(f"/api/campaigns/{campaign.id}").json()
        assert campaign_body["raised"] == 500
        assert campaign_body["donors_count"] == 1

    def test_declined_payment(self, client, pending_payment, signed_callback):
        resp = client.get(CALLBACK_URL, params=signed_callback(pp_ResponseCode="105"))

        body = resp.json()
        assert resp.status_code == 200
        assert body["status"] == "failed"
        assert body["message"] == "Transaction declined by the issuer"
        assert body["response_code"] == "105"

        status = client.get(f"/api/payment/{pending_payment.txn_ref}").json()
        assert status["status"] == "failed"
        assert status["failure_reason"] == "Transaction declined by the issuer"

    def test_tampered_amount_is_rejected(self, client, campaign, pending_payment, signed_callback):
        params = signed_callback()
        params["pp_Amount"] = "50000"

        resp = client.get(CALLBACK_URL, params=params)

        assert resp.status_code == 200
        assert resp.json()["status"] == "error"
        assert resp.json()["title"] == "Payment Error"
        assert client.get(f"/api/payment/{pending_payment.txn_ref}").json()["status"] == "pending"
        assert client.get(f"/api/campaigns/{campaign.id}").json()["raised"] == 0

    def test_unsigned_callback_is_an_error(self, client, pending_payment, signed_callback):
        params = signed_callback()
        del params["pp_SecureHash"]

        resp = client.get(CALLBACK_URL, params=params)

        assert resp.json()["status"] == "error"
        assert client.get(f"/api/payment/{pending_payment.txn_ref}").json()["status"] == "pending"

    def test_store_outage_still_shows_success(self, client, pending_payment, signed_callback, monkeypatch):
        def unavailable(self, txn_ref, values, credit_campaign=False):
            raise StoreUnavailableError("connection reset", txn_ref=txn_ref)

        monkeypatch.setattr(PaymentStore, "_transition", unavailable)

        body = client.get(CALLBACK_URL, params=signed_callback()).json()

        assert body["status"] == "success"
        assert body["amount_display"] == "₨500"
        assert "contact support" in body["support_notice"]

    def test_redelivered_callback_credits_once(self, client, campaign, pending_payment, signed_callback):
        params = signed_callback()

        first = client.get(CALLBACK_URL, params=params).json()
        second = client.get(CALLBACK_URL, params=params).json()

        assert first["status"] == second["status"] == "success"
        assert second["support_notice"] is None
        campaign_body = client.get(f"/api/campaigns/{campaign.id}").json()
        assert campaign_body["raised"] == 500
        assert campaign_body["donors_count"] == 1

    def test_unknown_txn_ref_still_shows_gateway_result(self, client, signed_callback):
        body = client.get(CALLBACK_URL, params=signed_callback(pp_TxnRefNo="TXN_0_unknown")).json()

        assert body["status"] == "success"
        assert body["support_notice"] is not None


class TestSummary:
    def test_summary(self, client):
        resp = client.get("/api/payment/summary", params={"amount": 10000})

        assert resp.status_code == 200
        assert resp.json() == {"amount": 10000, "fee": 200, "total": 10200, "currency": "PKR"}

    def test_rejects_non_positive_amount(self, client):
        assert client.get("/api/payment/summary", params={"amount": 0}).status_code == 422


class TestInitiate:
    def _payload(self, campaign_id, **overrides):
        payload = {"campaign_id": campaign_id, "amount": 500, "phone_number": "03001234567"}
        payload.update(overrides)
        return payload

    def test_initiate(self, client, campaign):
        resp = client.post("/api/payment/initiate", json=self._payload(campaign.id))

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["status"] == "pending"
        assert body["summary"] == {"amount": 500, "fee": 50, "total": 550, "currency": "PKR"}
        assert body["gateway_url"].startswith("https://sandbox.jazzcash.com.pk")
        assert body["gateway_fields"]["pp_TxnRefNo"] == body["txn_ref"]
        assert body["gateway_fields"]["pp_Amount"] == "550"
        assert len(body["gateway_fields"]["pp_SecureHash"]) == 64

        status = client.get(f"/api/payment/{body['txn_ref']}").json()
        assert status["status"] == "pending"
        assert status["campaign_id"] == campaign.id

    @pytest.mark.parametrize(
        "overrides",
        [{"amount": 50}, {"amount": 2_000_000}, {"phone_number": "12345"}],
    )
    def test_invalid_request(self, client, campaign, overrides):
        resp = client.post("/api/payment/initiate", json=self._payload(campaign.id, **overrides))

        assert resp.status_code == 400

    def test_unknown_campaign(self, client):
        resp = client.post("/api/payment/initiate", json=self._payload(999))

        assert resp.status_code == 404
        assert resp.json()["detail"] == "Campaign not found"


def test_unknown_payment_status(client):
    resp = client.get("/api/payment/TXN_0_missing")

    assert resp.status_code == 404


def test_health(client):
    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["database"] == "connected"


def test_health_degraded_still_closes_session(client, monkeypatch):
    closed = []

    class UnreachableSession:
        def execute(self, statement):
            raise OperationalError("SELECT 1", {}, Exception("unable to open database file"))

        def close(self):
            closed.append(True)

    monkeypatch.setattr(main_module, "SessionLocal", UnreachableSession)

    body = client.get("/health").json()

    assert body["status"] == "degraded"
    assert body["database"] == "disconnected"
    assert closed == [True]
