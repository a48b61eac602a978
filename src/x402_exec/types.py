"""
Type definitions for x402-exec payment headers
"""

import re
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

SCHEME_EXACT = "exact"

# Supported x402 protocol versions
X402_VERSIONS = (1,)

# Maximum digit length of an EVM atomic token amount
EVM_MAX_ATOMIC_UNITS = 40

_EVM_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_BYTES32_HEX_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")
_SIGNATURE_RE = re.compile(r"^0x[0-9a-fA-F]+$")
_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")


class AuthorizationType(str, Enum):
    """Token authorization protocol used to redeem the payment"""

    EIP3009 = "eip3009"
    PERMIT = "permit"
    PERMIT2 = "permit2"


DEFAULT_AUTHORIZATION_TYPE = AuthorizationType.EIP3009


def to_decimal_string(value: Any) -> Any:
    """Render wide integers as canonical decimal strings; other values pass through."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    return value


def _check_uint_string(value: str, field: str, max_length: int | None = None) -> str:
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"{field} must be a non-negative decimal integer string")
    if max_length is not None and len(value) > max_length:
        raise ValueError(f"{field} exceeds {max_length} digits")
    return value


def _check_evm_address(value: str, field: str) -> str:
    if not _EVM_ADDRESS_RE.match(value):
        raise ValueError(f"{field} is not a valid EVM address: {value}")
    return value


# ---------------------------------------------------------------------------
# Payment requirements
# ---------------------------------------------------------------------------


class PaymentRequirementsExtra(BaseModel):
    """Scheme-selection metadata carried in payment requirements"""

    name: Optional[str] = None
    version: Optional[str] = None
    authorization_type: Optional[str] = Field(None, alias="authorizationType")

    class Config:
        populate_by_name = True
        extra = "allow"
        frozen = True


class PaymentRequirements(BaseModel):
    """Payment requirements from server"""

    scheme: Literal["exact"]
    network: str
    max_amount_required: str = Field(alias="maxAmountRequired")
    resource: str
    description: str
    mime_type: str = Field(alias="mimeType")
    output_schema: Optional[dict[str, Any]] = Field(None, alias="outputSchema")
    pay_to: str = Field(alias="payTo")
    max_timeout_seconds: int = Field(alias="maxTimeoutSeconds")
    asset: str
    extra: Optional[PaymentRequirementsExtra] = None

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("max_amount_required", mode="before")
    @classmethod
    def _normalize_amount(cls, v: Any) -> Any:
        return to_decimal_string(v)

    @field_validator("max_amount_required")
    @classmethod
    def _validate_amount(cls, v: str) -> str:
        return _check_uint_string(v, "maxAmountRequired")

    @property
    def authorization_type(self) -> str:
        """Declared authorization type, ``eip3009`` when absent"""
        if self.extra is not None and self.extra.authorization_type:
            return self.extra.authorization_type
        return DEFAULT_AUTHORIZATION_TYPE.value


class PaymentRequired(BaseModel):
    """Payment required response body (402)"""

    x402_version: int = Field(alias="x402Version")
    error: Optional[str] = None
    accepts: list[PaymentRequirements]

    class Config:
        populate_by_name = True


# ---------------------------------------------------------------------------
# Scheme authorizations
# ---------------------------------------------------------------------------


class Eip3009Authorization(BaseModel):
    """TransferWithAuthorization parameters"""

    from_address: str = Field(alias="from")
    to: str
    value: str
    valid_after: str = Field(alias="validAfter")
    valid_before: str = Field(alias="validBefore")
    nonce: str  # 32-byte hex string (0x...)

    class Config:
        populate_by_name = True
        extra = "forbid"
        frozen = True

    @field_validator("value", "valid_after", "valid_before", mode="before")
    @classmethod
    def _normalize_numbers(cls, v: Any) -> Any:
        return to_decimal_string(v)

    @field_validator("from_address", "to")
    @classmethod
    def _validate_address(cls, v: str, info) -> str:
        return _check_evm_address(v, info.field_name)

    @field_validator("value")
    @classmethod
    def _validate_value(cls, v: str) -> str:
        return _check_uint_string(v, "value", EVM_MAX_ATOMIC_UNITS)

    @field_validator("valid_after", "valid_before")
    @classmethod
    def _validate_timestamps(cls, v: str, info) -> str:
        return _check_uint_string(v, info.field_name)

    @field_validator("nonce")
    @classmethod
    def _validate_nonce(cls, v: str) -> str:
        if not _BYTES32_HEX_RE.match(v):
            raise ValueError("nonce must be a 0x-prefixed 32-byte hex string")
        return v

    @model_validator(mode="after")
    def _validate_window(self) -> "Eip3009Authorization":
        if int(self.valid_after) >= int(self.valid_before):
            raise ValueError("validAfter must be earlier than validBefore")
        return self


class PermitAuthorization(BaseModel):
    """EIP-2612 permit parameters; nonce is resolved on-chain while signing"""

    owner: str
    spender: str
    value: str
    deadline: str
    nonce: Optional[str] = None

    class Config:
        populate_by_name = True
        extra = "forbid"
        frozen = True

    @field_validator("value", "deadline", "nonce", mode="before")
    @classmethod
    def _normalize_numbers(cls, v: Any) -> Any:
        return to_decimal_string(v)

    @field_validator("owner", "spender")
    @classmethod
    def _validate_address(cls, v: str, info) -> str:
        return _check_evm_address(v, info.field_name)

    @field_validator("value")
    @classmethod
    def _validate_value(cls, v: str) -> str:
        return _check_uint_string(v, "value", EVM_MAX_ATOMIC_UNITS)

    @field_validator("deadline", "nonce")
    @classmethod
    def _validate_uint(cls, v: Optional[str], info) -> Optional[str]:
        if v is None:
            return v
        return _check_uint_string(v, info.field_name)


class Permit2Authorization(BaseModel):
    """Permit2 PermitTransferFrom parameters; nonce is derived while signing"""

    owner: str
    spender: str
    token: str
    amount: str
    deadline: str
    nonce: Optional[str] = None

    class Config:
        populate_by_name = True
        extra = "forbid"
        frozen = True

    @field_validator("amount", "deadline", "nonce", mode="before")
    @classmethod
    def _normalize_numbers(cls, v: Any) -> Any:
        return to_decimal_string(v)

    @field_validator("owner", "spender", "token")
    @classmethod
    def _validate_address(cls, v: str, info) -> str:
        return _check_evm_address(v, info.field_name)

    @field_validator("amount")
    @classmethod
    def _validate_amount(cls, v: str) -> str:
        return _check_uint_string(v, "amount", EVM_MAX_ATOMIC_UNITS)

    @field_validator("deadline", "nonce")
    @classmethod
    def _validate_uint(cls, v: Optional[str], info) -> Optional[str]:
        if v is None:
            return v
        return _check_uint_string(v, info.field_name)


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------


def _check_signature(v: Optional[str]) -> Optional[str]:
    if v is not None and not _SIGNATURE_RE.match(v):
        raise ValueError("signature must be a 0x-prefixed hex string")
    return v


class Eip3009Payload(BaseModel):
    """EIP-3009 payload; unsigned while signature is None"""

    authorization_type: Literal["eip3009"] = Field("eip3009", alias="authorizationType")
    signature: Optional[str] = None
    authorization: Eip3009Authorization

    class Config:
        populate_by_name = True
        extra = "forbid"
        frozen = True

    _validate_signature = field_validator("signature")(_check_signature)

    @property
    def is_signed(self) -> bool:
        return self.signature is not None


class PermitPayload(BaseModel):
    """EIP-2612 payload; unsigned while signature or nonce is None"""

    authorization_type: Literal["permit"] = Field("permit", alias="authorizationType")
    signature: Optional[str] = None
    authorization: PermitAuthorization

    class Config:
        populate_by_name = True
        extra = "forbid"
        frozen = True

    _validate_signature = field_validator("signature")(_check_signature)

    @property
    def is_signed(self) -> bool:
        return self.signature is not None and self.authorization.nonce is not None


class Permit2Payload(BaseModel):
    """Permit2 payload; unsigned while signature or nonce is None"""

    authorization_type: Literal["permit2"] = Field("permit2", alias="authorizationType")
    signature: Optional[str] = None
    authorization: Permit2Authorization

    class Config:
        populate_by_name = True
        extra = "forbid"
        frozen = True

    _validate_signature = field_validator("signature")(_check_signature)

    @property
    def is_signed(self) -> bool:
        return self.signature is not None and self.authorization.nonce is not None


ExactEvmPayload = Annotated[
    Union[Eip3009Payload, PermitPayload, Permit2Payload],
    Field(discriminator="authorization_type"),
]


class ExactSvmPayload(BaseModel):
    """Partially signed SVM transaction (base64)"""

    transaction: str

    class Config:
        extra = "forbid"
        frozen = True

    @field_validator("transaction")
    @classmethod
    def _validate_transaction(cls, v: str) -> str:
        if not _BASE64_RE.match(v):
            raise ValueError("transaction must be base64 encoded")
        return v

    @property
    def is_signed(self) -> bool:
        return True


class PaymentPayload(BaseModel):
    """Payment header sent by client (X-PAYMENT)"""

    x402_version: int = Field(alias="x402Version")
    scheme: Literal["exact"]
    network: str
    payload: Union[ExactEvmPayload, ExactSvmPayload]

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("x402_version")
    @classmethod
    def _validate_version(cls, v: int) -> int:
        if v not in X402_VERSIONS:
            raise ValueError(f"Unsupported x402 version: {v}")
        return v
