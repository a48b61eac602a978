"""
X402ExecClient - builds signed payment headers
"""

import logging
from typing import Any, Mapping

from x402_exec.encoding import encode_payment
from x402_exec.exceptions import PayloadValidationError, SignerAddressUnavailableError, X402Error
from x402_exec.mechanisms import (
    SchemeMechanism,
    default_mechanisms,
    prepare_payment_header,
    select_mechanism,
)
from x402_exec.signers.client.base import require_capabilities
from x402_exec.types import AuthorizationType, PaymentPayload, PaymentRequirements


def resolve_signer_address(signer: Any) -> str:
    """Address of the signer's account, as reported by ``get_address()``.

    Raises:
        SignerAddressUnavailableError: If the signer has no account attached
    """
    get_address = getattr(signer, "get_address", None)
    address = get_address() if callable(get_address) else None
    if not address:
        raise SignerAddressUnavailableError(
            f"Could not get signer address from {type(signer).__name__}"
        )
    return address


class X402ExecClient:
    """
    Payment header assembler.

    Runs authorization builder, scheme signer and codec in sequence. Nothing is
    retried: any failure aborts the header and the caller starts over, which
    mints a fresh nonce and validity window.
    """

    def __init__(
        self,
        signer: Any,
        mechanisms: Mapping[AuthorizationType, SchemeMechanism] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize X402ExecClient.

        Args:
            signer: ClientSigner (EIP-3009 only) or ConnectedClientSigner (all schemes)
            mechanisms: Mechanism registry (default: all built-in mechanisms)
            logger: Logger for payment events (default: module logger)
        """
        self._signer = signer
        self._logger = logger or logging.getLogger(__name__)
        self._mechanisms: dict[AuthorizationType, SchemeMechanism] = (
            dict(mechanisms) if mechanisms is not None else default_mechanisms(logger)
        )

    def register(self, mechanism: SchemeMechanism) -> "X402ExecClient":
        """
        Register (or replace) the mechanism for its authorization type.

        Returns:
            self for method chaining
        """
        authorization_type = mechanism.authorization_type()
        self._logger.info(
            f"Registering mechanism for authorization type '{authorization_type.value}'"
        )
        self._mechanisms[authorization_type] = mechanism
        return self

    def get_signer(self) -> Any:
        return self._signer

    def supports(self, requirements: PaymentRequirements) -> bool:
        """True if a mechanism is registered and the signer can serve it."""
        try:
            mechanism = select_mechanism(requirements, self._mechanisms)
            require_capabilities(self._signer, mechanism.required_capabilities)
        except X402Error:
            return False
        return True

    def resolve_signer_address(self) -> str:
        return resolve_signer_address(self._signer)

    def prepare_payment_header(
        self,
        payer_address: str,
        x402_version: int,
        requirements: PaymentRequirements,
    ) -> PaymentPayload:
        """Build the unsigned header with this client's mechanisms."""
        return prepare_payment_header(
            payer_address, x402_version, requirements, mechanisms=self._mechanisms
        )

    async def sign_payment_header(
        self,
        requirements: PaymentRequirements,
        unsigned: PaymentPayload,
    ) -> PaymentPayload:
        """
        Sign an unsigned header.

        Raises:
            UnsupportedSchemeError: Unknown authorization type
            UnsupportedSignerError: Signer lacks a capability the scheme requires
            PayloadValidationError: Unsigned payload does not match the requirements' scheme
        """
        mechanism = select_mechanism(requirements, self._mechanisms)
        expected = mechanism.authorization_type().value
        payload = unsigned.payload
        if getattr(payload, "authorization_type", None) != expected:
            raise PayloadValidationError(
                f"Payload authorization type {getattr(payload, 'authorization_type', None)!r} "
                f"does not match requirements ({expected!r})"
            )

        result = await mechanism.sign(self._signer, payload.authorization, requirements)
        signed = mechanism.finalize(payload, result)
        return unsigned.model_copy(update={"payload": signed})

    async def create_payment_header(
        self,
        x402_version: int,
        requirements: PaymentRequirements,
    ) -> str:
        """
        Build, sign and encode a payment header.

        Args:
            x402_version: Protocol version to declare
            requirements: Selected payment requirements

        Returns:
            Base64 header value for X-PAYMENT
        """
        payer = self.resolve_signer_address()
        self._logger.info(
            f"Creating payment header for authorizationType={requirements.authorization_type}, "
            f"network={requirements.network}, payer={payer}"
        )

        unsigned = self.prepare_payment_header(payer, x402_version, requirements)
        signed = await self.sign_payment_header(requirements, unsigned)
        encoded = encode_payment(signed)

        self._logger.info("Payment header created successfully")
        return encoded


async def create_payment_header(
    signer: Any,
    x402_version: int,
    requirements: PaymentRequirements,
) -> str:
    """Build, sign and encode a payment header with the built-in mechanisms."""
    return await X402ExecClient(signer).create_payment_header(x402_version, requirements)
