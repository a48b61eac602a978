"""
Eip3009Mechanism - EIP-3009 transferWithAuthorization
"""

import secrets
from typing import Any

from eth_utils import to_checksum_address

from x402_exec.abi import (
    TRANSFER_WITH_AUTHORIZATION_PRIMARY_TYPE,
    TRANSFER_WITH_AUTHORIZATION_TYPES,
)
from x402_exec.config import NetworkConfig
from x402_exec.exceptions import UnknownTokenError
from x402_exec.mechanisms.base import SchemeMechanism, SignResult
from x402_exec.signers.client.base import KEY_PAIR_CAPABILITIES
from x402_exec.tokens import TokenRegistry
from x402_exec.types import (
    AuthorizationType,
    Eip3009Authorization,
    Eip3009Payload,
    PaymentRequirements,
)


def create_nonce() -> str:
    """Generate a random 32-byte nonce (0x-prefixed hex)."""
    return "0x" + secrets.token_hex(32)


def build_eip712_domain(
    token_name: str,
    token_version: str,
    chain_id: int,
    verifying_contract: str,
) -> dict[str, Any]:
    """Build EIP-712 domain dict for the token contract."""
    return {
        "name": token_name,
        "version": token_version,
        "chainId": chain_id,
        "verifyingContract": to_checksum_address(verifying_contract),
    }


def build_eip712_message(auth: Eip3009Authorization) -> dict[str, Any]:
    """Build EIP-712 message dict from authorization."""
    return {
        "from": to_checksum_address(auth.from_address),
        "to": to_checksum_address(auth.to),
        "value": int(auth.value),
        "validAfter": int(auth.valid_after),
        "validBefore": int(auth.valid_before),
        "nonce": bytes.fromhex(auth.nonce[2:]),
    }


class Eip3009Mechanism(SchemeMechanism[Eip3009Payload]):
    """TransferWithAuthorization: everything is known locally, no chain reads."""

    required_capabilities = KEY_PAIR_CAPABILITIES

    def authorization_type(self) -> AuthorizationType:
        return AuthorizationType.EIP3009

    def prepare(self, payer: str, requirements: PaymentRequirements, now: int) -> Eip3009Payload:
        valid_after = now - NetworkConfig.EIP3009_VALID_AFTER_SKEW_SECONDS
        valid_before = now + requirements.max_timeout_seconds

        return Eip3009Payload(
            authorization=Eip3009Authorization(
                **{
                    "from": payer,
                    "to": requirements.pay_to,
                    "value": requirements.max_amount_required,
                    "validAfter": str(valid_after),
                    "validBefore": str(valid_before),
                    "nonce": create_nonce(),
                }
            )
        )

    def _resolve_token_metadata(self, requirements: PaymentRequirements) -> tuple[str, str]:
        extra = requirements.extra
        name = extra.name if extra else None
        version = extra.version if extra else None

        if not name or not version:
            token_info = TokenRegistry.find_by_address(requirements.network, requirements.asset)
            if token_info is not None:
                name = name or token_info.name
                version = version or token_info.version

        if not name:
            raise UnknownTokenError(
                f"Token name for {requirements.asset} on {requirements.network} is required "
                "to sign TransferWithAuthorization"
            )
        return name, version or "1"

    async def _sign(
        self,
        signer: Any,
        authorization: Eip3009Authorization,
        requirements: PaymentRequirements,
    ) -> SignResult:
        chain_id = NetworkConfig.get_chain_id(requirements.network)
        token_name, token_version = self._resolve_token_metadata(requirements)

        domain = build_eip712_domain(token_name, token_version, chain_id, requirements.asset)
        message = build_eip712_message(authorization)

        self._logger.info(
            "Signing TransferWithAuthorization: from=%s, to=%s, value=%s, token=%s",
            authorization.from_address,
            authorization.to,
            authorization.value,
            requirements.asset,
        )

        signature = await signer.sign_typed_data(
            domain=domain,
            types=TRANSFER_WITH_AUTHORIZATION_TYPES,
            message=message,
            primary_type=TRANSFER_WITH_AUTHORIZATION_PRIMARY_TYPE,
        )
        return SignResult(signature=signature)
