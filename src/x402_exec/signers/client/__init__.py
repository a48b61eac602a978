"""
Client Signers
"""

from x402_exec.signers.client.base import (
    KEY_PAIR_CAPABILITIES,
    WALLET_CAPABILITIES,
    ClientSigner,
    ConnectedClientSigner,
    SignerCapability,
    require_capabilities,
)
from x402_exec.signers.client.evm_signer import EvmClientSigner, EvmWalletSigner

__all__ = [
    "ClientSigner",
    "ConnectedClientSigner",
    "EvmClientSigner",
    "EvmWalletSigner",
    "KEY_PAIR_CAPABILITIES",
    "SignerCapability",
    "WALLET_CAPABILITIES",
    "require_capabilities",
]
