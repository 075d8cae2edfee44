"""
Tests for payments.py - PayPal order creation.
"""
from unittest import mock

import pytest
import requests

from errors import Internal
from payments import LIVE_URL, SANDBOX_URL, PayPalClient, format_amount

from conftest import APPROVE_URL


def test_format_amount():
    assert format_amount(6000) == "60.00"
    assert format_amount(1999) == "19.99"
    assert format_amount(5) == "0.05"


def test_mode_selects_base_url():
    assert PayPalClient(mode="live", session=mock.Mock()).base_url == LIVE_URL
    assert PayPalClient(mode="sandbox", session=mock.Mock()).base_url == SANDBOX_URL


class TestCreateCheckout:

    def test_returns_approve_link(self, paypal_client):
        assert paypal_client.create_checkout(6000, "USD") == APPROVE_URL

    def test_order_request_body(self, paypal_client, paypal_session):
        paypal_client.create_checkout(6000, "USD")

        token_call, order_call = paypal_session.post.call_args_list
        assert token_call.args[0] == f"{SANDBOX_URL}/v1/oauth2/token"
        assert token_call.kwargs["auth"] == ("client-id", "client-secret")
        assert order_call.args[0] == f"{SANDBOX_URL}/v2/checkout/orders"
        assert order_call.kwargs["headers"]["Authorization"] == "Bearer A21AAF-test-token"
        assert order_call.kwargs["headers"]["Prefer"] == "return=representation"
        body = order_call.kwargs["json"]
        assert body["intent"] == "CAPTURE"
        assert body["purchase_units"] == [{"amount": {"currency_code": "USD", "value": "60.00"}}]
        assert body["application_context"]["return_url"] == "http://localhost:2000/success"
        assert body["application_context"]["cancel_url"] == "http://localhost:2000/cancel"

    def test_transport_error_is_internal(self, paypal_client, paypal_session):
        paypal_session.post.side_effect = requests.ConnectionError("unreachable")

        with pytest.raises(Internal):
            paypal_client.create_checkout(6000, "USD")

    def test_http_error_is_internal(self, paypal_client, paypal_session):
        denied = mock.Mock()
        denied.raise_for_status.side_effect = requests.HTTPError("401 Client Error")
        paypal_session.post.side_effect = [denied]

        with pytest.raises(Internal):
            paypal_client.create_checkout(6000, "USD")

    def test_missing_approve_link_is_internal(self, paypal_client, paypal_session):
        token_resp = mock.Mock()
        token_resp.json.return_value = {"access_token": "tok"}
        order_resp = mock.Mock()
        order_resp.json.return_value = {"id": "X", "links": [{"rel": "self", "href": "https://x"}]}
        paypal_session.post.side_effect = [token_resp, order_resp]

        with pytest.raises(Internal):
            paypal_client.create_checkout(6000, "USD")
