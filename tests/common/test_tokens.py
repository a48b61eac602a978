"""
Tests for the token registry and requirement builder
"""

import pytest

from x402_exec.exceptions import UnknownTokenError, UnsupportedNetworkError
from x402_exec.tokens import TokenInfo, TokenRegistry, build_requirements

MERCHANT = "0x2222222222222222222222222222222222222222"
USDC = "0x036CbD53842c5426634e7929541eC2318f3dCF7e"
CUSTOM_TOKEN = "0x3333333333333333333333333333333333333333"


@pytest.fixture
def _custom_token():
    TokenRegistry.register_token(
        "base-sepolia",
        TokenInfo(
            address=CUSTOM_TOKEN,
            decimals=18,
            name="Permit Token",
            symbol="ptk",
            authorization_type="permit",
        ),
    )
    yield
    TokenRegistry._tokens["base-sepolia"].pop("PTK", None)


class TestTokenRegistry:
    def test_get_token(self):
        token = TokenRegistry.get_token("base-sepolia", "usdc")
        assert token.address == USDC
        assert token.decimals == 6
        assert token.version == "2"

    def test_get_unknown_token(self):
        with pytest.raises(UnknownTokenError):
            TokenRegistry.get_token("base-sepolia", "DAI")

    def test_find_by_address_ignores_case(self):
        token = TokenRegistry.find_by_address("base-sepolia", USDC.lower())
        assert token is not None
        assert token.symbol == "USDC"
        assert TokenRegistry.find_by_address("base", USDC) is None

    def test_default_token(self):
        assert TokenRegistry.get_default_token("sepolia-optimism").symbol == "USDC"
        with pytest.raises(UnknownTokenError):
            TokenRegistry.get_default_token("iotex")

    def test_register_rejects_unknown_network(self):
        with pytest.raises(UnsupportedNetworkError):
            TokenRegistry.register_token(
                "unknown", TokenInfo(address=CUSTOM_TOKEN, decimals=18, name="X", symbol="X")
            )

    def test_register_token(self, _custom_token):
        assert "PTK" in TokenRegistry.get_network_tokens("base-sepolia")


class TestBuildRequirements:
    def test_default_token(self):
        requirements = build_requirements("base-sepolia", MERCHANT, 1000000)
        assert requirements.scheme == "exact"
        assert requirements.asset == USDC
        assert requirements.max_amount_required == "1000000"
        assert requirements.max_timeout_seconds == 300
        assert requirements.extra.name == "USDC"
        assert requirements.extra.version == "2"
        assert requirements.authorization_type == "eip3009"

    def test_permit2_token(self):
        requirements = build_requirements("base-sepolia", MERCHANT, "5", token="WETH")
        assert requirements.authorization_type == "permit2"

    def test_token_by_address(self, _custom_token):
        requirements = build_requirements("base-sepolia", MERCHANT, "5", token=CUSTOM_TOKEN)
        assert requirements.authorization_type == "permit"
        assert requirements.extra.name == "Permit Token"

    def test_authorization_type_override_and_extra(self):
        requirements = build_requirements(
            "base-sepolia",
            MERCHANT,
            "5",
            authorization_type="permit",
            resource="https://api.example.com/data",
            memo="order-1",
        )
        assert requirements.authorization_type == "permit"
        assert requirements.resource == "https://api.example.com/data"
        assert requirements.model_dump(by_alias=True)["extra"]["memo"] == "order-1"

    def test_unknown_token(self):
        with pytest.raises(UnknownTokenError):
            build_requirements("base-sepolia", MERCHANT, "5", token=CUSTOM_TOKEN)
