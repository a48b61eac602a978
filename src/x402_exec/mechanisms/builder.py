"""
Authorization builder - dispatches payment requirements to their scheme mechanism
"""

import logging
import time
from typing import Mapping

from pydantic import ValidationError as PydanticValidationError

from x402_exec.config import NetworkConfig
from x402_exec.exceptions import (
    ConfigurationError,
    PayloadValidationError,
    UnsupportedNetworkError,
    UnsupportedSchemeError,
)
from x402_exec.mechanisms.base import SchemeMechanism
from x402_exec.mechanisms.eip3009 import Eip3009Mechanism
from x402_exec.mechanisms.permit import PermitMechanism
from x402_exec.mechanisms.permit2 import Permit2Mechanism
from x402_exec.types import AuthorizationType, PaymentPayload, PaymentRequirements

MechanismRegistry = Mapping[AuthorizationType, SchemeMechanism]


def default_mechanisms(
    logger: logging.Logger | None = None,
) -> dict[AuthorizationType, SchemeMechanism]:
    """One mechanism per authorization type."""
    registry: dict[AuthorizationType, SchemeMechanism] = {
        m.authorization_type(): m
        for m in (Eip3009Mechanism(logger), PermitMechanism(logger), Permit2Mechanism(logger))
    }
    missing = set(AuthorizationType) - set(registry)
    if missing:
        raise ConfigurationError(f"No mechanism for authorization types: {sorted(missing)}")
    return registry


def resolve_authorization_type(requirements: PaymentRequirements) -> AuthorizationType:
    """Parse ``extra.authorizationType`` (``eip3009`` when absent).

    Raises:
        UnsupportedSchemeError: For any other tag
    """
    tag = requirements.authorization_type
    try:
        return AuthorizationType(tag)
    except ValueError:
        raise UnsupportedSchemeError(tag) from None


def select_mechanism(
    requirements: PaymentRequirements,
    mechanisms: MechanismRegistry,
) -> SchemeMechanism:
    authorization_type = resolve_authorization_type(requirements)
    mechanism = mechanisms.get(authorization_type)
    if mechanism is None:
        raise UnsupportedSchemeError(authorization_type.value)
    return mechanism


def prepare_payment_header(
    payer_address: str,
    x402_version: int,
    requirements: PaymentRequirements,
    now: int | None = None,
    mechanisms: MechanismRegistry | None = None,
) -> PaymentPayload:
    """
    Build the unsigned payment header for *requirements*.

    Args:
        payer_address: Address that will sign and pay
        x402_version: Protocol version to declare
        requirements: Payment requirements from server
        now: Unix time in seconds (default: current time)
        mechanisms: Registry override (default: all built-in mechanisms)

    Returns:
        PaymentPayload whose payload has no signature yet

    Raises:
        UnsupportedSchemeError: Unknown authorization type
        UnsupportedNetworkError: Network is not an EVM network
        PayloadValidationError: Requirements produce an invalid authorization
    """
    mechanism = select_mechanism(requirements, mechanisms or default_mechanisms())

    if not NetworkConfig.is_evm_network(requirements.network):
        raise UnsupportedNetworkError(
            f"{mechanism.authorization_type().value} requires an EVM network, "
            f"got {requirements.network}"
        )

    if now is None:
        now = int(time.time())

    try:
        unsigned = mechanism.prepare(payer_address, requirements, now)
        return PaymentPayload(
            x402Version=x402_version,
            scheme=requirements.scheme,
            network=requirements.network,
            payload=unsigned,
        )
    except PydanticValidationError as e:
        raise PayloadValidationError(f"Invalid payment authorization: {e}") from e
