"""Unit tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from spaceswap.api.endpoints import get_exchange, get_settings
from spaceswap.api.main import app
from spaceswap.config import ApiSettings
from spaceswap.errors import InsufficientOutputAmount
from tests.helpers import ALICE, BOB, OWNER, make_small_exchange


@pytest.fixture
def small():
    return make_small_exchange()


@pytest.fixture
def client(small):
    """Test client bound to a (1000, 10) pool seeded by ALICE, faucet on."""
    app.dependency_overrides[get_exchange] = lambda: small
    app.dependency_overrides[get_settings] = lambda: ApiSettings(faucet_enabled=True)
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestReads:
    """Tests for read-only endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_reserves(self, client):
        response = client.get("/reserves")

        assert response.status_code == 200
        assert response.json() == {
            "reserveToken": "1000",
            "reserveNative": "10",
            "totalShares": "100",
        }

    def test_quote_native_for_token(self, client):
        response = client.get("/quote/native-for-token", params={"amountIn": "1"})

        assert response.status_code == 200
        assert response.json() == {"amountIn": "1", "amountOut": "90"}

    def test_quote_unknown_direction(self, client):
        response = client.get("/quote/sideways", params={"amountIn": "1"})
        assert response.status_code == 422

    def test_quote_negative_amount(self, client):
        response = client.get("/quote/token-for-native", params={"amountIn": "-1"})
        assert response.status_code == 422

    def test_account(self, client):
        response = client.get(f"/accounts/{ALICE}")

        assert response.status_code == 200
        assert response.json() == {
            "address": ALICE,
            "native": "990",
            "token": "99000",
            "shares": "90",
        }

    def test_account_invalid_address(self, client):
        response = client.get("/accounts/0x1234")
        assert response.status_code == 422

    def test_tax_flag(self, client):
        assert client.get("/tax").json() == {"enabled": False}


class TestSwaps:
    """Tests for the swap endpoints."""

    def test_swap_native_for_token(self, client, small):
        response = client.post(
            "/swap/native-for-token",
            json={"sender": BOB, "value": "1", "amountOutMin": "90"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["amountOut"] == "90"
        assert data["assetIn"] == "ETH"
        assert data["assetOut"] == "SPC"
        assert data["recipient"] == BOB
        assert small.router.get_reserves() == (910, 11)

    def test_slippage_maps_to_400(self, client, small):
        response = client.post(
            "/swap/native-for-token",
            json={"sender": BOB, "value": "1", "amountOutMin": "91"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "InsufficientOutputAmount"
        assert small.router.get_reserves() == (1000, 10)

    def test_swap_token_for_native(self, client):
        response = client.post(
            "/swap/token-for-native",
            json={"sender": BOB, "amountIn": "500", "amountOutMin": "3"},
        )

        assert response.status_code == 200
        assert response.json()["amountOut"] == "3"

    def test_invalid_amount_is_422(self, client):
        response = client.post(
            "/swap/token-for-native",
            json={"sender": BOB, "amountIn": "lots"},
        )
        assert response.status_code == 422

    def test_invalid_address_is_422(self, client):
        response = client.post(
            "/swap/native-for-token",
            json={"sender": "0xnot-an-address", "value": "1"},
        )
        assert response.status_code == 422


class TestLiquidity:
    """Tests for the liquidity endpoints."""

    def test_add_liquidity_refunds_excess(self, client):
        response = client.post(
            "/liquidity/add",
            json={"sender": BOB, "tokenAmountDesired": "100", "value": "5"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "tokenAmount": "100",
            "nativeAmount": "1",
            "shares": "10",
            "nativeRefund": "4",
            "recipient": BOB,
        }

    def test_remove_liquidity(self, client):
        response = client.post("/liquidity/remove", json={"sender": ALICE, "shareAmount": "90"})

        assert response.status_code == 200
        assert response.json() == {
            "shares": "90",
            "tokenAmount": "900",
            "nativeAmount": "9",
            "recipient": ALICE,
        }

    def test_remove_without_approval(self, client):
        client.post("/shares/approve", json={"sender": ALICE, "amount": "0"})

        response = client.post("/liquidity/remove", json={"sender": ALICE, "shareAmount": "90"})

        assert response.status_code == 400
        assert response.json()["error"] == "InsufficientAllowance"

    def test_token_approve(self, client, small):
        response = client.post("/token/approve", json={"sender": BOB, "amount": "7"})

        assert response.json() == {"approved": True}
        assert small.token.allowance(BOB, small.router.address) == 7


class TestAdmin:
    """Tests for the tax toggle and the faucet."""

    def test_owner_toggles_tax(self, client):
        response = client.post("/tax/toggle", json={"sender": OWNER})

        assert response.status_code == 200
        assert response.json() == {"enabled": True}

    def test_non_owner_gets_403(self, client):
        response = client.post("/tax/toggle", json={"sender": ALICE})

        assert response.status_code == 403
        body = response.json()
        assert body["error"] == "UnauthorizedCaller"
        assert "not the owner" in body["detail"]

    def test_faucet(self, client, small):
        response = client.post("/faucet", json={"address": BOB, "amount": "25"})

        assert response.status_code == 200
        assert response.json()["native"] == "1025"
        assert small.chain.native_balance(BOB) == 1025

    def test_faucet_disabled(self, client):
        app.dependency_overrides[get_settings] = lambda: ApiSettings(faucet_enabled=False)

        response = client.post("/faucet", json={"address": BOB, "amount": "25"})

        assert response.status_code == 404

    def test_faucet_off_by_default(self, monkeypatch):
        monkeypatch.delenv("SPACESWAP_FAUCET_ENABLED", raising=False)
        assert ApiSettings().faucet_enabled is False


class TestEventDraining:
    """State-changing calls do not accumulate events on the exchange."""

    def test_swap_drains_log(self, client, small):
        small.chain.drain_events()

        response = client.post("/swap/native-for-token", json={"sender": BOB, "value": "1"})

        assert response.status_code == 200
        assert small.chain.events == ()

    def test_failed_call_drains_log(self, client, small):
        client.post("/swap/native-for-token", json={"sender": BOB, "value": "1", "amountOutMin": "91"})
        assert small.chain.events == ()

    def test_transaction_drains_on_error(self, small):
        """The lock is released and the log emptied even when the call fails."""
        with pytest.raises(InsufficientOutputAmount):
            with small.transaction():
                small.router.swap_native_for_token(BOB, 91, BOB, value=1)

        assert small.chain.events == ()
        assert not small.lock.locked()
        assert small.router.get_reserves() == (1000, 10)
