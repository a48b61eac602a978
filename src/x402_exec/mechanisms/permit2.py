"""
Permit2Mechanism - Uniswap Permit2 SignatureTransfer (PermitTransferFrom)
"""

import logging
import secrets
import time
from typing import Any, Callable

from eth_utils import to_checksum_address

from x402_exec.abi import (
    ERC20_ABI,
    PERMIT2_ABI,
    PERMIT2_DOMAIN_NAME,
    PERMIT2_PRIMARY_TYPE,
    PERMIT2_TYPES,
)
from x402_exec.config import NetworkConfig
from x402_exec.exceptions import AllowanceCheckError, ApprovalFailedError
from x402_exec.mechanisms.base import SchemeMechanism, SignResult
from x402_exec.signers.client.base import WALLET_CAPABILITIES
from x402_exec.types import (
    AuthorizationType,
    PaymentRequirements,
    Permit2Authorization,
    Permit2Payload,
)

_SUCCESS_STATUSES = (1, "0x1", "success")


def build_permit2_domain(chain_id: int) -> dict[str, Any]:
    """Permit2 domain: fixed name, no version, same contract on every chain."""
    return {
        "name": PERMIT2_DOMAIN_NAME,
        "chainId": chain_id,
        "verifyingContract": NetworkConfig.PERMIT2_ADDRESS,
    }


def build_permit2_message(auth: Permit2Authorization, nonce: int) -> dict[str, Any]:
    """Build the PermitTransferFrom message."""
    return {
        "permitted": {
            "token": to_checksum_address(auth.token),
            "amount": int(auth.amount),
        },
        "spender": to_checksum_address(auth.spender),
        "nonce": nonce,
        "deadline": int(auth.deadline),
    }


class Permit2Mechanism(SchemeMechanism[Permit2Payload]):
    """Permit2 PermitTransferFrom.

    Permit2 nonces are arbitrary uint256 values tracked in a per-owner bitmap,
    and the token must have approved the Permit2 contract. Signing may therefore
    send an approval transaction and block until it is mined.
    """

    required_capabilities = WALLET_CAPABILITIES

    def __init__(
        self,
        logger: logging.Logger | None = None,
        approval_timeout: float | None = None,
        clock: Callable[[], float] = time.time,
        randbelow: Callable[[int], int] = secrets.randbelow,
    ) -> None:
        super().__init__(logger)
        self._approval_timeout = (
            approval_timeout
            if approval_timeout is not None
            else NetworkConfig.APPROVAL_TIMEOUT_SECONDS
        )
        self._clock = clock
        self._randbelow = randbelow

    def authorization_type(self) -> AuthorizationType:
        return AuthorizationType.PERMIT2

    def prepare(self, payer: str, requirements: PaymentRequirements, now: int) -> Permit2Payload:
        deadline = self._deadline(requirements, now)
        return Permit2Payload(
            authorization=Permit2Authorization(
                owner=payer,
                spender=requirements.pay_to,
                token=requirements.asset,
                amount=requirements.max_amount_required,
                deadline=str(deadline),
            )
        )

    async def _sign(
        self,
        signer: Any,
        authorization: Permit2Authorization,
        requirements: PaymentRequirements,
    ) -> SignResult:
        chain_id = NetworkConfig.get_chain_id(requirements.network)
        token_address = to_checksum_address(authorization.token)
        owner = to_checksum_address(authorization.owner)
        amount = int(authorization.amount)

        allowance = await self.check_allowance(signer, owner, token_address)
        has_approval = allowance >= amount
        if not has_approval:
            self._logger.warning(
                "Permit2 is not approved for this token",
                extra={
                    "token": token_address,
                    "spender": NetworkConfig.PERMIT2_ADDRESS,
                    "allowance": str(allowance),
                    "required": str(amount),
                },
            )

        nonce = await self.create_nonce(signer, owner)

        domain = build_permit2_domain(chain_id)
        message = build_permit2_message(authorization, nonce)

        if not has_approval:
            await self.approve(signer, token_address)

        self._logger.debug(
            "Signing PermitTransferFrom",
            extra={
                "owner": owner,
                "spender": message["spender"],
                "token": token_address,
                "amount": authorization.amount,
                "nonce": str(nonce),
                "deadline": authorization.deadline,
                "chain_id": chain_id,
            },
        )

        signature = await signer.sign_typed_data(
            domain=domain,
            types=PERMIT2_TYPES,
            message=message,
            primary_type=PERMIT2_PRIMARY_TYPE,
        )
        return SignResult(signature=signature, nonce=str(nonce))

    async def check_allowance(self, signer: Any, owner: str, token: str) -> int:
        """ERC-20 allowance granted by *owner* to Permit2.

        Raises:
            AllowanceCheckError: If the read fails
        """
        try:
            allowance = await signer.read_contract(
                token, ERC20_ABI, "allowance", [owner, NetworkConfig.PERMIT2_ADDRESS]
            )
        except Exception as e:
            raise AllowanceCheckError(
                f"Failed to read Permit2 allowance of {owner} for token {token}: {e}"
            ) from e
        return int(allowance)

    async def create_nonce(self, signer: Any, owner: str) -> int:
        """Timestamp-based nonce, advanced once if the bitmap marks it used.

        The advanced value is not re-checked. A failed bitmap read falls back
        to the unverified candidate.
        """
        candidate = int(self._clock()) * 1000 + self._randbelow(1000)
        word_pos = candidate >> 8
        bit_index = candidate & 0xFF

        try:
            bitmap = await signer.read_contract(
                NetworkConfig.PERMIT2_ADDRESS,
                PERMIT2_ABI,
                "nonceBitmap",
                [owner, word_pos],
            )
        except Exception as e:
            self._logger.warning(
                "Could not check Permit2 nonce bitmap, using timestamp-based nonce",
                extra={"owner": owner, "nonce": str(candidate), "error": str(e)},
            )
            return candidate

        if (int(bitmap) >> bit_index) & 1:
            self._logger.info(
                "Permit2 nonce already used, advancing by one",
                extra={"owner": owner, "nonce": str(candidate)},
            )
            return candidate + 1
        return candidate

    async def approve(self, signer: Any, token: str) -> str:
        """Approve Permit2 for the maximum uint160 amount and wait for the receipt.

        Returns:
            Approval transaction hash

        Raises:
            ApprovalFailedError: If the transaction cannot be sent, times out or reverts
        """
        self._logger.info(
            "Approving Permit2 to spend tokens",
            extra={"token": token, "spender": NetworkConfig.PERMIT2_ADDRESS},
        )

        try:
            tx_hash = await signer.write_contract(
                token,
                ERC20_ABI,
                "approve",
                [NetworkConfig.PERMIT2_ADDRESS, NetworkConfig.MAX_PERMIT2_AMOUNT],
            )
        except Exception as e:
            raise ApprovalFailedError(token, f"approval transaction not sent: {e}") from e

        self._logger.info(
            "Waiting for Permit2 approval confirmation",
            extra={"token": token, "tx_hash": tx_hash, "timeout": self._approval_timeout},
        )

        try:
            receipt = await signer.wait_for_transaction_receipt(
                tx_hash, timeout=self._approval_timeout
            )
        except Exception as e:
            raise ApprovalFailedError(token, str(e), tx_hash=tx_hash) from e

        status = receipt.get("status")
        if status not in _SUCCESS_STATUSES:
            raise ApprovalFailedError(
                token, f"transaction reverted (status={status})", tx_hash=tx_hash
            )

        self._logger.info(
            "Permit2 approval successful",
            extra={
                "token": token,
                "tx_hash": tx_hash,
                "block_number": receipt.get("blockNumber"),
            },
        )
        return tx_hash
