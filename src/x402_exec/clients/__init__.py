"""
x402-exec Client SDK
"""

from x402_exec.clients.x402_exec_client import (
    X402ExecClient,
    create_payment_header,
    resolve_signer_address,
)
from x402_exec.clients.x402_http_client import (
    PAYMENT_HEADER,
    PAYMENT_RESPONSE_HEADER,
    X402HttpClient,
)

__all__ = [
    "PAYMENT_HEADER",
    "PAYMENT_RESPONSE_HEADER",
    "X402ExecClient",
    "X402HttpClient",
    "create_payment_header",
    "resolve_signer_address",
]
