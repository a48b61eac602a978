"""
Tests for payment header models
"""

import pytest
from pydantic import ValidationError

from x402_exec.types import (
    AuthorizationType,
    Eip3009Authorization,
    Eip3009Payload,
    PaymentPayload,
    PaymentRequired,
    PaymentRequirements,
    PermitAuthorization,
    PermitPayload,
)

PAYER = "0x1111111111111111111111111111111111111111"
MERCHANT = "0x2222222222222222222222222222222222222222"
USDC = "0x036CbD53842c5426634e7929541eC2318f3dCF7e"
NONCE = "0x" + "11" * 32


def _requirements(**overrides):
    fields = {
        "scheme": "exact",
        "network": "base-sepolia",
        "maxAmountRequired": "1000000",
        "resource": "https://api.example.com/resource",
        "description": "",
        "mimeType": "application/json",
        "payTo": MERCHANT,
        "maxTimeoutSeconds": 60,
        "asset": USDC,
    }
    fields.update(overrides)
    return PaymentRequirements(**fields)


def _eip3009_authorization(**overrides):
    fields = {
        "from": PAYER,
        "to": MERCHANT,
        "value": "1000000",
        "validAfter": "100",
        "validBefore": "200",
        "nonce": NONCE,
    }
    fields.update(overrides)
    return Eip3009Authorization(**fields)


class TestPaymentRequirements:
    def test_aliases(self):
        requirements = _requirements()
        assert requirements.pay_to == MERCHANT
        assert requirements.max_timeout_seconds == 60
        assert requirements.mime_type == "application/json"

    def test_integer_amount_is_normalized(self):
        requirements = _requirements(maxAmountRequired=10**30)
        assert requirements.max_amount_required == "1" + "0" * 30

    def test_rejects_negative_amount(self):
        with pytest.raises(ValidationError):
            _requirements(maxAmountRequired="-1")

    def test_rejects_non_exact_scheme(self):
        with pytest.raises(ValidationError):
            _requirements(scheme="upto")

    def test_authorization_type_defaults_to_eip3009(self):
        assert _requirements().authorization_type == AuthorizationType.EIP3009.value
        assert _requirements(extra={"name": "USDC"}).authorization_type == "eip3009"

    def test_authorization_type_from_extra(self):
        requirements = _requirements(extra={"authorizationType": "permit2"})
        assert requirements.authorization_type == "permit2"

    def test_extra_keeps_unknown_keys(self):
        requirements = _requirements(extra={"name": "USDC", "custom": "value"})
        dumped = requirements.model_dump(by_alias=True, exclude_none=True)
        assert dumped["extra"] == {"name": "USDC", "custom": "value"}


class TestPaymentRequired:
    def test_parse_body(self):
        body = {
            "x402Version": 1,
            "error": "X-PAYMENT header is required",
            "accepts": [_requirements().model_dump(by_alias=True)],
        }
        payment_required = PaymentRequired.model_validate(body)
        assert payment_required.x402_version == 1
        assert payment_required.accepts[0].asset == USDC


class TestEip3009Authorization:
    def test_integer_fields_are_normalized(self):
        auth = _eip3009_authorization(value=5, validAfter=1, validBefore=2)
        assert auth.value == "5"
        assert auth.valid_after == "1"
        assert auth.valid_before == "2"

    def test_rejects_empty_window(self):
        with pytest.raises(ValidationError, match="validAfter"):
            _eip3009_authorization(validAfter="200", validBefore="200")

    def test_rejects_bad_nonce(self):
        with pytest.raises(ValidationError):
            _eip3009_authorization(nonce="0x1234")

    def test_rejects_bad_address(self):
        with pytest.raises(ValidationError):
            _eip3009_authorization(to="0xMerchant")

    def test_rejects_oversized_value(self):
        with pytest.raises(ValidationError):
            _eip3009_authorization(value="1" * 41)

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            _eip3009_authorization(deadline="300")


class TestPayloads:
    def test_unsigned_until_signature(self):
        payload = Eip3009Payload(authorization=_eip3009_authorization())
        assert payload.authorization_type == "eip3009"
        assert not payload.is_signed

        signed = Eip3009Payload(signature="0x" + "ab" * 65, authorization=payload.authorization)
        assert signed.is_signed

    def test_permit_requires_nonce_to_be_signed(self):
        authorization = PermitAuthorization(
            owner=PAYER, spender=MERCHANT, value="1", deadline="100"
        )
        payload = PermitPayload(signature="0x" + "ab" * 65, authorization=authorization)
        assert not payload.is_signed

    def test_rejects_non_hex_signature(self):
        with pytest.raises(ValidationError):
            Eip3009Payload(signature="signature", authorization=_eip3009_authorization())

    def test_discriminates_on_authorization_type(self):
        payment = PaymentPayload.model_validate(
            {
                "x402Version": 1,
                "scheme": "exact",
                "network": "base-sepolia",
                "payload": {
                    "authorizationType": "permit",
                    "authorization": {
                        "owner": PAYER,
                        "spender": MERCHANT,
                        "value": "1",
                        "deadline": "100",
                        "nonce": "0",
                    },
                },
            }
        )
        assert isinstance(payment.payload, PermitPayload)

    def test_rejects_unsupported_version(self):
        with pytest.raises(ValidationError):
            PaymentPayload(
                x402Version=2,
                scheme="exact",
                network="base-sepolia",
                payload=Eip3009Payload(authorization=_eip3009_authorization()),
            )

    def test_models_are_frozen(self):
        auth = _eip3009_authorization()
        with pytest.raises(ValidationError):
            auth.value = "2"
