"""
PermitMechanism - EIP-2612 permit
"""

import asyncio
from typing import Any

from eth_utils import to_checksum_address

from x402_exec.abi import ERC20_ABI, PERMIT_PRIMARY_TYPE, PERMIT_TYPES
from x402_exec.config import NetworkConfig
from x402_exec.mechanisms.base import SchemeMechanism, SignResult
from x402_exec.signers.client.base import KEY_PAIR_CAPABILITIES, SignerCapability
from x402_exec.types import (
    AuthorizationType,
    PaymentRequirements,
    PermitAuthorization,
    PermitPayload,
)

DEFAULT_PERMIT_VERSION = "1"


class PermitMechanism(SchemeMechanism[PermitPayload]):
    """EIP-2612 permit.

    The domain needs the token's on-chain name and the owner's current permit
    nonce, so only signers that can read contract state are accepted.
    """

    required_capabilities = KEY_PAIR_CAPABILITIES | {SignerCapability.READ_CONTRACT}

    def authorization_type(self) -> AuthorizationType:
        return AuthorizationType.PERMIT

    def prepare(self, payer: str, requirements: PaymentRequirements, now: int) -> PermitPayload:
        deadline = self._deadline(requirements, now)
        return PermitPayload(
            authorization=PermitAuthorization(
                owner=payer,
                spender=requirements.pay_to,
                value=requirements.max_amount_required,
                deadline=str(deadline),
            )
        )

    async def _sign(
        self,
        signer: Any,
        authorization: PermitAuthorization,
        requirements: PaymentRequirements,
    ) -> SignResult:
        chain_id = NetworkConfig.get_chain_id(requirements.network)
        token_address = to_checksum_address(requirements.asset)
        owner = to_checksum_address(authorization.owner)
        extra = requirements.extra
        version = extra.version if extra and extra.version else DEFAULT_PERMIT_VERSION

        nonce, name = await asyncio.gather(
            self._read(signer, token_address, ERC20_ABI, "nonces", [owner]),
            self._read(signer, token_address, ERC20_ABI, "name"),
        )
        nonce = int(nonce)

        domain = {
            "name": name,
            "version": version,
            "chainId": chain_id,
            "verifyingContract": token_address,
        }
        message = {
            "owner": owner,
            "spender": to_checksum_address(authorization.spender),
            "value": int(authorization.value),
            "nonce": nonce,
            "deadline": int(authorization.deadline),
        }

        self._logger.info(
            "Signing Permit: owner=%s, spender=%s, value=%s, nonce=%s, token=%s",
            owner,
            message["spender"],
            authorization.value,
            nonce,
            token_address,
        )

        signature = await signer.sign_typed_data(
            domain=domain,
            types=PERMIT_TYPES,
            message=message,
            primary_type=PERMIT_PRIMARY_TYPE,
        )
        return SignResult(signature=signature, nonce=str(nonce))
