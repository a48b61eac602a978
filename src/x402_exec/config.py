"""
x402-exec network configuration
Network resolver, well-known contract addresses and signing defaults
"""

import os
from typing import Dict, Literal

from x402_exec.exceptions import UnsupportedNetworkError

NetworkFamily = Literal["evm", "svm"]


class NetworkConfig:
    """Network configuration for chain IDs, contract addresses and RPC endpoints"""

    # Default networks
    BASE_SEPOLIA = "base-sepolia"
    SEPOLIA_OPTIMISM = "sepolia-optimism"

    # EVM chain IDs
    EVM_CHAIN_IDS: Dict[str, int] = {
        "base-sepolia": 84532,
        "base": 8453,
        "avalanche-fuji": 43113,
        "avalanche": 43114,
        "iotex": 4689,
        "sei": 1329,
        "sei-testnet": 1328,
        "polygon": 137,
        "polygon-amoy": 80002,
        "peaq": 3338,
        "sepolia-optimism": 11155420,
        "optimism": 10,
        "ethereum": 1,
        "sepolia": 11155111,
    }

    # SVM networks use pseudo chain IDs (cluster identifiers)
    SVM_CHAIN_IDS: Dict[str, int] = {
        "solana": 101,
        "solana-devnet": 103,
    }

    # Uniswap Permit2, deployed at the same address on every supported chain
    PERMIT2_ADDRESS = "0x000000000022D473030F116dDEE9F6B43aC78BA3"

    # Permit2 stores allowances as uint160
    MAX_PERMIT2_AMOUNT = (1 << 160) - 1

    # Tolerated clock skew for EIP-3009 validAfter (10 minutes)
    EIP3009_VALID_AFTER_SKEW_SECONDS = 600

    # Upper bound on waiting for the Permit2 approval receipt
    APPROVAL_TIMEOUT_SECONDS = 120

    # Public RPC endpoints; override with X402_EXEC_RPC_URL_<NETWORK>
    RPC_URLS: Dict[str, str] = {
        "base-sepolia": "https://sepolia.base.org",
        "base": "https://mainnet.base.org",
        "sepolia-optimism": "https://sepolia.optimism.io",
        "optimism": "https://mainnet.optimism.io",
        "avalanche-fuji": "https://api.avax-test.network/ext/bc/C/rpc",
        "avalanche": "https://api.avax.network/ext/bc/C/rpc",
        "polygon-amoy": "https://rpc-amoy.polygon.technology",
        "polygon": "https://polygon-rpc.com",
    }

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        """Get chain ID for network

        Args:
            network: Network name (e.g., "base-sepolia", "solana-devnet")

        Returns:
            Chain ID as integer

        Raises:
            UnsupportedNetworkError: If network is not supported
        """
        chain_id = cls.EVM_CHAIN_IDS.get(network)
        if chain_id is None:
            chain_id = cls.SVM_CHAIN_IDS.get(network)
        if chain_id is None:
            raise UnsupportedNetworkError(f"Unsupported network: {network}")
        return chain_id

    @classmethod
    def get_network_by_chain_id(cls, chain_id: int) -> str:
        """Reverse lookup of an EVM chain ID"""
        for network, known in cls.EVM_CHAIN_IDS.items():
            if known == chain_id:
                return network
        raise UnsupportedNetworkError(f"Unsupported chain ID: {chain_id}")

    @classmethod
    def get_network_family(cls, network: str) -> NetworkFamily:
        """Classify *network* as account-model EVM or SVM.

        Raises:
            UnsupportedNetworkError: If network belongs to neither family
        """
        if network in cls.EVM_CHAIN_IDS:
            return "evm"
        if network in cls.SVM_CHAIN_IDS:
            return "svm"
        raise UnsupportedNetworkError(f"Unsupported network: {network}")

    @classmethod
    def is_evm_network(cls, network: str) -> bool:
        return network in cls.EVM_CHAIN_IDS

    @classmethod
    def get_rpc_url(cls, network: str) -> str | None:
        """Get RPC URL for an EVM network.

        The environment variable ``X402_EXEC_RPC_URL_<NETWORK>`` (upper case,
        dashes replaced by underscores) takes precedence over the built-in table.

        Returns:
            RPC URL string, or None if not configured
        """
        env_key = "X402_EXEC_RPC_URL_" + network.upper().replace("-", "_")
        return os.environ.get(env_key) or cls.RPC_URLS.get(network)
