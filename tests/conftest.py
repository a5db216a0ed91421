import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JAZZCASH_MERCHANT_ID"] = "MC00001"
os.environ["JAZZCASH_PASSWORD"] = "test-password"
os.environ["JAZZCASH_INTEGRITY_SALT"] = "test-integrity-salt"
os.environ["RECONCILE_MAX_ATTEMPTS"] = "3"
os.environ["RECONCILE_RETRY_WAIT_SECONDS"] = "0"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from donations.config import GatewayConfig  # noqa: E402
from donations.database import get_db, init_db  # noqa: E402
from donations.models.campaign import Campaign  # noqa: E402
from donations.models.payment import PaymentRecord, PENDING  # noqa: E402
from donations.gateway.errors import StoreUnavailableError  # noqa: E402
from donations.services.payment_store import PaymentStore  # noqa: E402
from donations.utils.hashing import SECURE_HASH_FIELD, generate_secure_hash  # noqa: E402

TEST_SALT = "test-integrity-salt"


def _callback_params(**overrides) -> dict:
    params = {
        "pp_Version": "1.1",
        "pp_TxnType": "MWALLET",
        "pp_MerchantID": "MC00001",
        "pp_TxnRefNo": "TXN_1700000000000_abc123def",
        "pp_Amount": "500",
        "pp_TxnCurrency": "PKR",
        "pp_BillReference": "CAMP_1",
        "pp_Description": "Campaign donation",
        "pp_TxnDateTime": "20240115143000",
        "pp_ResponseCode": "000",
        "pp_ResponseMessage": "Thank you for Using JazzCash, your transaction was successful.",
        "pp_AuthCode": "482913",
        "pp_RetreivalReferenceNo": "240115482913",
        "pp_SettlementExpiry": "",
    }
    params.update(overrides)
    return params


class FlakyStore(PaymentStore):
    """Fails the first ``failures`` writes with a transient store error."""

    def __init__(self, db, failures):
        super().__init__(db)
        self.failures = failures
        self.attempts = 0

    def _transition(self, txn_ref, values, credit_campaign=False):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise StoreUnavailableError("connection reset", txn_ref=txn_ref)
        return super()._transition(txn_ref, values, credit_campaign)


def _sign(params: dict, salt: str = TEST_SALT) -> dict:
    signed = {k: v for k, v in params.items() if k != SECURE_HASH_FIELD}
    signed[SECURE_HASH_FIELD] = generate_secure_hash(signed, salt)
    return signed


@pytest.fixture()
def gateway_config():
    return GatewayConfig(
        merchant_id="MC00001",
        password="test-password",
        integrity_salt=TEST_SALT,
        return_url="http://testserver/api/payment/callback",
    )


@pytest.fixture()
def signed_callback():
    """Factory: signed callback query params, with field overrides applied before signing."""

    def factory(**overrides):
        return _sign(_callback_params(**overrides))

    return factory


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def campaign(db):
    campaign = Campaign(title="Clean Water for Ward 7", goal=100000)
    db.add(campaign)
    db.commit()
    db.refresh(campaign)
    return campaign


@pytest.fixture()
def pending_payment(db, campaign):
    payment = PaymentRecord(
        txn_ref="TXN_1700000000000_abc123def",
        campaign_id=campaign.id,
        amount=500,
        fee=50,
        total=550,
        currency="PKR",
        status=PENDING,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return payment


@pytest.fixture()
def client(session_factory):
    from donations.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def flaky_store(db):
    """Factory: a payment store whose first ``failures`` writes are transient errors."""

    def factory(failures):
        return FlakyStore(db, failures)

    return factory
