"""
Signer utility functions
"""

from typing import Any

from x402_exec.config import NetworkConfig

# Canonical EIP-712 domain field order and types
_EIP712_DOMAIN_FIELDS: list[tuple[str, str]] = [
    ("name", "string"),
    ("version", "string"),
    ("chainId", "uint256"),
    ("verifyingContract", "address"),
    ("salt", "bytes32"),
]


def _eip712_domain_type_from_keys(domain: dict[str, Any]) -> list[dict[str, str]]:
    """Build an EIP712Domain type array from the keys present in *domain*.

    Preserves the canonical field order defined in EIP-712, so Permit2's
    version-less domain hashes differently from a token domain.
    """
    return [{"name": name, "type": typ} for name, typ in _EIP712_DOMAIN_FIELDS if name in domain]


def build_typed_data(
    domain: dict[str, Any],
    types: dict[str, Any],
    message: dict[str, Any],
    primary_type: str,
) -> dict[str, Any]:
    """Assemble the full EIP-712 structure accepted by eth-account and eth_signTypedData_v4"""
    return {
        "types": {"EIP712Domain": _eip712_domain_type_from_keys(domain), **types},
        "domain": domain,
        "primaryType": primary_type,
        "message": message,
    }


def to_json_typed_data(value: Any) -> Any:
    """Replace bytes with 0x-hex so typed data can be sent over JSON-RPC"""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, dict):
        return {k: to_json_typed_data(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_json_typed_data(v) for v in value]
    return value


def to_hex(value: Any) -> str:
    """Normalize HexBytes/bytes/str to a 0x-prefixed hex string"""
    if isinstance(value, str):
        return value if value.startswith("0x") else "0x" + value
    return "0x" + bytes(value).hex()


def resolve_provider_uri(network: str) -> str | None:
    """Resolve a network name to an RPC provider URI.

    Checks in order:
    1. If network is already an HTTP/WS URL, return as-is
    2. Look up in NetworkConfig (environment overrides first)
    3. Return None (no provider available)
    """
    if network.startswith(("http://", "https://", "ws://", "wss://")):
        return network
    return NetworkConfig.get_rpc_url(network)
