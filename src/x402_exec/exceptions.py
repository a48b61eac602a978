"""
x402-exec custom exception hierarchy
"""


class X402Error(Exception):
    """x402-exec base exception"""

    pass


class ConfigurationError(X402Error):
    """Configuration-related error"""

    pass


class UnsupportedNetworkError(ConfigurationError):
    """Unsupported network"""

    pass


class UnsupportedSchemeError(ConfigurationError):
    """Unsupported authorization type"""

    def __init__(self, authorization_type: str | None):
        self.authorization_type = authorization_type
        super().__init__(f"Unsupported authorization type: {authorization_type}")


class UnknownTokenError(ConfigurationError):
    """Unknown token"""

    pass


class SignerAddressUnavailableError(ConfigurationError):
    """Signer exposes neither a connected account nor a key address"""

    pass


class SignatureError(X402Error):
    """Signature-related error"""

    pass


class SignatureCreationError(SignatureError):
    """Signature creation failed"""

    pass


class UnsupportedSignerError(SignatureError):
    """Signer lacks a capability required by the authorization scheme"""

    def __init__(self, message: str, missing: frozenset | None = None):
        self.missing = missing or frozenset()
        super().__init__(message)


class ContractReadError(X402Error):
    """On-chain read failed"""

    pass


class AllowanceCheckError(ContractReadError):
    """Failed to check allowance"""

    pass


class AllowanceError(X402Error):
    """Allowance-related error"""

    pass


class ApprovalFailedError(AllowanceError):
    """Approval transaction did not confirm successfully"""

    def __init__(self, token: str, reason: str, tx_hash: str | None = None):
        self.token = token
        self.reason = reason
        self.tx_hash = tx_hash
        super().__init__(f"Failed to approve Permit2 for token {token}: {reason}")


class TransactionError(X402Error):
    """Transaction-related error"""

    pass


class TransactionTimeoutError(TransactionError):
    """Transaction timeout"""

    pass


class TransactionFailedError(TransactionError):
    """Transaction execution failed"""

    pass


class ValidationError(X402Error):
    """Validation-related error"""

    pass


class PayloadValidationError(ValidationError):
    """Payment payload is malformed or not in the expected state"""

    pass
