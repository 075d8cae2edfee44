"""
Pytest configuration and shared fixtures.

MongoDB is replaced by mongomock and the upload directory by tmp_path.
"""
from unittest import mock

import mongomock
import pytest
from fastapi.testclient import TestClient

import database
from main import app, get_blob_store, get_payment_client
from payments import PayPalClient
from uploads import LocalBlobStore

APPROVE_URL = "https://www.sandbox.paypal.com/checkoutnow?token=5O190127TN364715T"


@pytest.fixture
def mongo_db():
    """Fresh in-memory database with the production indexes."""
    db = mongomock.MongoClient()["JamJob"]
    database.ensure_indexes(db)
    return db


@pytest.fixture
def make_user(mongo_db):
    """Insert a user document directly and return its email."""
    def _make_user(email="a@example.com", total_jobs_posted=0, **fields):
        mongo_db["users"].insert_one(
            {"email": email, "emailVerified": True, "totalJobsPosted": total_jobs_posted, **fields}
        )
        return email
    return _make_user


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(tmp_path / "uploads")


@pytest.fixture
def paypal_session():
    """requests.Session double answering the token and order calls."""
    token_resp = mock.Mock()
    token_resp.json.return_value = {"access_token": "A21AAF-test-token", "token_type": "Bearer"}
    order_resp = mock.Mock()
    order_resp.json.return_value = {
        "id": "5O190127TN364715T",
        "status": "CREATED",
        "links": [
            {"href": "https://api-m.sandbox.paypal.com/v2/checkout/orders/5O190127TN364715T", "rel": "self"},
            {"href": APPROVE_URL, "rel": "approve"},
        ],
    }
    session = mock.Mock()
    session.post.side_effect = [token_resp, order_resp]
    return session


@pytest.fixture
def paypal_client(paypal_session):
    return PayPalClient(
        client_id="client-id",
        client_secret="client-secret",
        mode="sandbox",
        return_url="http://localhost:2000/success",
        cancel_url="http://localhost:2000/cancel",
        session=paypal_session,
    )


@pytest.fixture
def client(mongo_db, blob_store, paypal_client):
    app.dependency_overrides[database.get_database] = lambda: mongo_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_payment_client] = lambda: paypal_client
    yield TestClient(app)
    app.dependency_overrides.clear()
