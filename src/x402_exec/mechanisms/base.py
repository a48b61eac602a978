"""
Scheme mechanism base interface
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import ValidationError as PydanticValidationError

from x402_exec.exceptions import ContractReadError, PayloadValidationError, X402Error
from x402_exec.signers.client.base import (
    KEY_PAIR_CAPABILITIES,
    SignerCapability,
    require_capabilities,
)
from x402_exec.types import AuthorizationType, PaymentRequirements

P = TypeVar("P")


@dataclass(frozen=True)
class SignResult:
    """Signature plus the nonce finalized while signing (None when fixed at build time)"""

    signature: str
    nonce: str | None = None


class SchemeMechanism(ABC, Generic[P]):
    """
    Abstract base class for authorization schemes.

    A mechanism builds the unsigned payload for its scheme and later signs it,
    resolving whatever on-chain state the scheme depends on.
    """

    required_capabilities: frozenset[SignerCapability] = KEY_PAIR_CAPABILITIES

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(type(self).__module__)

    @abstractmethod
    def authorization_type(self) -> AuthorizationType:
        """Discriminant tag handled by this mechanism"""
        pass

    @abstractmethod
    def prepare(self, payer: str, requirements: PaymentRequirements, now: int) -> P:
        """
        Build the unsigned payload.

        Args:
            payer: Payer address
            requirements: Payment requirements from server
            now: Current unix time in seconds

        Returns:
            Payload with signature (and on-chain nonce) left unset
        """
        pass

    def _deadline(self, requirements: PaymentRequirements, now: int) -> int:
        """Deadline *maxTimeoutSeconds* after *now*; must lie strictly in the future."""
        deadline = now + requirements.max_timeout_seconds
        if deadline <= now:
            raise PayloadValidationError(
                f"{self.authorization_type().value} deadline {deadline} is not after {now}: "
                f"maxTimeoutSeconds must be positive, got {requirements.max_timeout_seconds}"
            )
        return deadline

    async def sign(
        self,
        signer: Any,
        authorization: Any,
        requirements: PaymentRequirements,
    ) -> SignResult:
        """
        Sign *authorization* after checking the signer can serve this scheme.

        Raises:
            UnsupportedSignerError: Before any network call when capabilities are missing
        """
        require_capabilities(signer, self.required_capabilities)
        return await self._sign(signer, authorization, requirements)

    @abstractmethod
    async def _sign(
        self,
        signer: Any,
        authorization: Any,
        requirements: PaymentRequirements,
    ) -> SignResult:
        pass

    def finalize(self, unsigned: P, result: SignResult) -> P:
        """Return a new signed payload; *unsigned* is left untouched."""
        authorization = unsigned.authorization
        try:
            if result.nonce is not None:
                authorization = type(authorization)(
                    **{**authorization.model_dump(), "nonce": result.nonce}
                )
            return type(unsigned)(signature=result.signature, authorization=authorization)
        except PydanticValidationError as e:
            raise PayloadValidationError(
                f"Invalid signed {self.authorization_type().value} payload: {e}"
            ) from e

    async def _read(
        self,
        signer: Any,
        address: str,
        abi: list[dict[str, Any]],
        method: str,
        args: list[Any] | None = None,
    ) -> Any:
        """Contract read that surfaces failures as ContractReadError"""
        try:
            return await signer.read_contract(address, abi, method, args or [])
        except X402Error:
            raise
        except Exception as e:
            raise ContractReadError(f"Failed to call {method} on {address}: {e}") from e
