"""
x402-exec - payment header signing for the x402 protocol

Builds and signs X-PAYMENT headers for EIP-3009, EIP-2612 permit and
Uniswap Permit2 token authorizations on EVM networks.
"""

__version__ = "0.1.0"

from x402_exec.types import (
    AuthorizationType,
    Eip3009Authorization,
    Eip3009Payload,
    ExactSvmPayload,
    PaymentPayload,
    PaymentRequired,
    PaymentRequirements,
    PaymentRequirementsExtra,
    Permit2Authorization,
    Permit2Payload,
    PermitAuthorization,
    PermitPayload,
)
from x402_exec.exceptions import (
    X402Error,
    ConfigurationError,
    UnsupportedNetworkError,
    UnsupportedSchemeError,
    UnknownTokenError,
    SignerAddressUnavailableError,
    SignatureError,
    SignatureCreationError,
    UnsupportedSignerError,
    ContractReadError,
    AllowanceCheckError,
    AllowanceError,
    ApprovalFailedError,
    TransactionError,
    TransactionTimeoutError,
    TransactionFailedError,
    ValidationError,
    PayloadValidationError,
)
from x402_exec.config import NetworkConfig
from x402_exec.encoding import decode_payment, encode_payment
from x402_exec.mechanisms import prepare_payment_header
from x402_exec.clients import X402ExecClient, X402HttpClient, create_payment_header
from x402_exec.signers.client import EvmClientSigner, EvmWalletSigner
from x402_exec.tokens import TokenInfo, TokenRegistry, build_requirements

__all__ = [
    "__version__",
    # Types
    "AuthorizationType",
    "Eip3009Authorization",
    "Eip3009Payload",
    "ExactSvmPayload",
    "PaymentPayload",
    "PaymentRequired",
    "PaymentRequirements",
    "PaymentRequirementsExtra",
    "Permit2Authorization",
    "Permit2Payload",
    "PermitAuthorization",
    "PermitPayload",
    # Exceptions
    "X402Error",
    "ConfigurationError",
    "UnsupportedNetworkError",
    "UnsupportedSchemeError",
    "UnknownTokenError",
    "SignerAddressUnavailableError",
    "SignatureError",
    "SignatureCreationError",
    "UnsupportedSignerError",
    "ContractReadError",
    "AllowanceCheckError",
    "AllowanceError",
    "ApprovalFailedError",
    "TransactionError",
    "TransactionTimeoutError",
    "TransactionFailedError",
    "ValidationError",
    "PayloadValidationError",
    # Operations
    "NetworkConfig",
    "create_payment_header",
    "decode_payment",
    "encode_payment",
    "prepare_payment_header",
    "build_requirements",
    # Clients and signers
    "X402ExecClient",
    "X402HttpClient",
    "EvmClientSigner",
    "EvmWalletSigner",
    "TokenInfo",
    "TokenRegistry",
]
