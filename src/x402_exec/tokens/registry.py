"""
Token registry - known token deployments per network and requirement helpers
"""

from dataclasses import dataclass
from typing import Any

from x402_exec.config import NetworkConfig
from x402_exec.exceptions import UnknownTokenError
from x402_exec.types import (
    SCHEME_EXACT,
    AuthorizationType,
    PaymentRequirements,
    PaymentRequirementsExtra,
)

DEFAULT_TIMEOUT_SECONDS = 300


@dataclass
class TokenInfo:
    """Token information"""

    address: str
    decimals: int
    name: str
    symbol: str
    version: str = "1"
    authorization_type: str = AuthorizationType.EIP3009.value


class TokenRegistry:
    """Token registry

    The first token registered for a network is its default payment asset.
    """

    _tokens: dict[str, dict[str, TokenInfo]] = {
        "base-sepolia": {
            "USDC": TokenInfo(
                address="0x036CbD53842c5426634e7929541eC2318f3dCF7e",
                decimals=6,
                name="USDC",
                symbol="USDC",
                version="2",
            ),
            "WETH": TokenInfo(
                address="0x4200000000000000000000000000000000000006",
                decimals=18,
                name="Wrapped Ether",
                symbol="WETH",
                authorization_type=AuthorizationType.PERMIT2.value,
            ),
        },
        "sepolia-optimism": {
            "USDC": TokenInfo(
                address="0x5fd84259d66Cd46123540766Be93DFE6D43130D7",
                decimals=6,
                name="USDC",
                symbol="USDC",
                version="2",
            ),
            "WETH": TokenInfo(
                address="0x4200000000000000000000000000000000000006",
                decimals=18,
                name="Wrapped Ether",
                symbol="WETH",
                authorization_type=AuthorizationType.PERMIT2.value,
            ),
        },
    }

    @classmethod
    def register_token(cls, network: str, token: TokenInfo) -> None:
        """Register a custom token for specified network

        Args:
            network: Network name (e.g. "base-sepolia")
            token: TokenInfo to register
        """
        # Reject unknown networks early
        NetworkConfig.get_chain_id(network)
        if network not in cls._tokens:
            cls._tokens[network] = {}
        cls._tokens[network][token.symbol.upper()] = token

    @classmethod
    def get_token(cls, network: str, symbol: str) -> TokenInfo:
        """Get token information for specified network and symbol

        Raises:
            UnknownTokenError: If token does not exist
        """
        tokens = cls._tokens.get(network, {})
        token = tokens.get(symbol.upper())
        if token is None:
            raise UnknownTokenError(f"Unknown token {symbol} on network {network}")
        return token

    @classmethod
    def find_by_address(cls, network: str, address: str) -> TokenInfo | None:
        """Find token information by address (case-insensitive)"""
        lower = address.lower()
        for info in cls._tokens.get(network, {}).values():
            if info.address.lower() == lower:
                return info
        return None

    @classmethod
    def get_default_token(cls, network: str) -> TokenInfo:
        """Default payment asset of *network*

        Raises:
            UnknownTokenError: If no token is registered for the network
        """
        tokens = cls._tokens.get(network)
        if not tokens:
            raise UnknownTokenError(f"No tokens registered for network {network}")
        return next(iter(tokens.values()))

    @classmethod
    def get_network_tokens(cls, network: str) -> dict[str, TokenInfo]:
        """Get all tokens for specified network"""
        return cls._tokens.get(network, {})


def build_requirements(
    network: str,
    pay_to: str,
    amount: int | str,
    token: str | None = None,
    resource: str = "",
    description: str = "",
    mime_type: str = "application/json",
    max_timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    authorization_type: str | None = None,
    **extra: Any,
) -> PaymentRequirements:
    """Build exact-scheme payment requirements from the token catalog.

    Args:
        network: Network name
        pay_to: Payee address
        amount: Amount in the token's smallest unit
        token: Token symbol or address; the network default when omitted
        authorization_type: Overrides the catalog's authorization type
        **extra: Additional keys copied into ``extra``

    Raises:
        UnknownTokenError: If the token is not in the catalog
    """
    if token is None:
        info = TokenRegistry.get_default_token(network)
    elif token.startswith("0x"):
        info = TokenRegistry.find_by_address(network, token)
        if info is None:
            raise UnknownTokenError(f"Unknown token {token} on network {network}")
    else:
        info = TokenRegistry.get_token(network, token)

    return PaymentRequirements(
        scheme=SCHEME_EXACT,
        network=network,
        maxAmountRequired=amount,
        resource=resource,
        description=description,
        mimeType=mime_type,
        payTo=pay_to,
        maxTimeoutSeconds=max_timeout_seconds,
        asset=info.address,
        extra=PaymentRequirementsExtra(
            name=info.name,
            version=info.version,
            authorizationType=authorization_type or info.authorization_type,
            **extra,
        ),
    )
