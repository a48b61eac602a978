"""
Tests for the authorization builder
"""

import pytest

from x402_exec.exceptions import (
    ConfigurationError,
    PayloadValidationError,
    UnsupportedNetworkError,
    UnsupportedSchemeError,
)
from x402_exec.mechanisms import (
    Eip3009Mechanism,
    Permit2Mechanism,
    PermitMechanism,
    default_mechanisms,
    prepare_payment_header,
    resolve_authorization_type,
)
from x402_exec.types import (
    AuthorizationType,
    Eip3009Payload,
    PaymentRequirements,
    Permit2Payload,
    PermitPayload,
)

PAYER = "0x1111111111111111111111111111111111111111"
MERCHANT = "0x2222222222222222222222222222222222222222"
NOW = 1_700_000_000


def _with(requirements, **updates):
    data = requirements.model_dump(by_alias=True)
    data.update(updates)
    return PaymentRequirements(**data)


class TestDefaultMechanisms:
    def test_every_authorization_type_is_covered(self):
        mechanisms = default_mechanisms()
        assert set(mechanisms) == set(AuthorizationType)
        assert isinstance(mechanisms[AuthorizationType.EIP3009], Eip3009Mechanism)
        assert isinstance(mechanisms[AuthorizationType.PERMIT], PermitMechanism)
        assert isinstance(mechanisms[AuthorizationType.PERMIT2], Permit2Mechanism)

    def test_configuration_error_base(self):
        assert issubclass(UnsupportedSchemeError, ConfigurationError)


class TestResolveAuthorizationType:
    def test_default(self, eip3009_requirements):
        assert resolve_authorization_type(eip3009_requirements) == AuthorizationType.EIP3009

    def test_unknown_tag(self, eip3009_requirements):
        requirements = _with(eip3009_requirements, extra={"authorizationType": "erc7702"})
        with pytest.raises(UnsupportedSchemeError) as exc_info:
            resolve_authorization_type(requirements)
        assert exc_info.value.authorization_type == "erc7702"


class TestPreparePaymentHeader:
    def test_eip3009(self, eip3009_requirements):
        header = prepare_payment_header(PAYER, 1, eip3009_requirements, now=NOW)

        assert header.x402_version == 1
        assert header.scheme == "exact"
        assert header.network == "base-sepolia"
        assert isinstance(header.payload, Eip3009Payload)
        assert header.payload.signature is None

        auth = header.payload.authorization
        assert auth.from_address == PAYER
        assert auth.to == MERCHANT
        assert auth.value == "1000000"
        assert auth.valid_after == str(NOW - 600)
        assert auth.valid_before == str(NOW + 300)
        assert int(auth.valid_before) - int(auth.valid_after) == 300 + 600
        assert auth.nonce.startswith("0x") and len(auth.nonce) == 66

    def test_eip3009_nonces_are_fresh(self, eip3009_requirements):
        headers = [
            prepare_payment_header(PAYER, 1, eip3009_requirements, now=NOW) for _ in range(5)
        ]
        nonces = {header.payload.authorization.nonce for header in headers}
        assert len(nonces) == 5

    def test_permit(self, permit_requirements):
        header = prepare_payment_header(PAYER, 1, permit_requirements, now=NOW)

        assert isinstance(header.payload, PermitPayload)
        auth = header.payload.authorization
        assert auth.owner == PAYER
        assert auth.spender == MERCHANT
        assert auth.value == "1000000"
        assert auth.deadline == str(NOW + 300)
        assert auth.nonce is None

    def test_permit2(self, permit2_requirements):
        header = prepare_payment_header(PAYER, 1, permit2_requirements, now=NOW)

        assert isinstance(header.payload, Permit2Payload)
        auth = header.payload.authorization
        assert auth.owner == PAYER
        assert auth.spender == MERCHANT
        assert auth.token == permit2_requirements.asset
        assert auth.amount == "1000000"
        assert auth.deadline == str(NOW + 300)
        assert auth.nonce is None

    def test_defaults_to_current_time(self, eip3009_requirements):
        header = prepare_payment_header(PAYER, 1, eip3009_requirements)
        assert int(header.payload.authorization.valid_after) > NOW - 600

    def test_unsupported_scheme(self, eip3009_requirements):
        requirements = _with(eip3009_requirements, extra={"authorizationType": "erc7702"})
        with pytest.raises(UnsupportedSchemeError):
            prepare_payment_header(PAYER, 1, requirements, now=NOW)

    def test_svm_network_rejected(self, permit2_requirements):
        requirements = _with(permit2_requirements, network="solana-devnet")
        with pytest.raises(UnsupportedNetworkError):
            prepare_payment_header(PAYER, 1, requirements, now=NOW)

    def test_unknown_network_rejected(self, eip3009_requirements):
        requirements = _with(eip3009_requirements, network="tron:nile")
        with pytest.raises(UnsupportedNetworkError):
            prepare_payment_header(PAYER, 1, requirements, now=NOW)

    def test_invalid_pay_to(self, eip3009_requirements):
        requirements = _with(eip3009_requirements, payTo="0xMerchant")
        with pytest.raises(PayloadValidationError):
            prepare_payment_header(PAYER, 1, requirements, now=NOW)

    def test_unsupported_version(self, eip3009_requirements):
        with pytest.raises(PayloadValidationError):
            prepare_payment_header(PAYER, 2, eip3009_requirements, now=NOW)

    def test_custom_registry(self, eip3009_requirements):
        with pytest.raises(UnsupportedSchemeError):
            prepare_payment_header(
                PAYER,
                1,
                eip3009_requirements,
                now=NOW,
                mechanisms={AuthorizationType.PERMIT: PermitMechanism()},
            )

    @pytest.mark.parametrize("timeout", [0, -60])
    @pytest.mark.parametrize("authorization_type", ["permit", "permit2"])
    def test_deadline_must_be_in_the_future(
        self, eip3009_requirements, authorization_type, timeout
    ):
        requirements = _with(
            eip3009_requirements,
            maxTimeoutSeconds=timeout,
            extra={"authorizationType": authorization_type},
        )
        with pytest.raises(PayloadValidationError, match="maxTimeoutSeconds"):
            prepare_payment_header(PAYER, 1, requirements, now=NOW)

    @pytest.mark.parametrize("authorization_type", ["permit", "permit2"])
    def test_one_second_deadline(self, eip3009_requirements, authorization_type):
        requirements = _with(
            eip3009_requirements,
            maxTimeoutSeconds=1,
            extra={"authorizationType": authorization_type},
        )
        header = prepare_payment_header(PAYER, 1, requirements, now=NOW)
        assert header.payload.authorization.deadline == str(NOW + 1)
