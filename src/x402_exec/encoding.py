"""
Encoding utilities for x402 payment headers
"""

import base64
import binascii
import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from x402_exec.config import NetworkConfig
from x402_exec.exceptions import PayloadValidationError
from x402_exec.types import (
    Eip3009Payload,
    ExactSvmPayload,
    PaymentPayload,
    Permit2Payload,
    PermitPayload,
    to_decimal_string,
)

# Authorization fields that may hold wide integers before normalization
NUMERIC_AUTHORIZATION_FIELDS: dict[str, tuple[str, ...]] = {
    "eip3009": ("value", "validAfter", "validBefore"),
    "permit": ("value", "deadline", "nonce"),
    "permit2": ("amount", "deadline", "nonce"),
}

_EVM_PAYLOADS = (Eip3009Payload, PermitPayload, Permit2Payload)


def encode_base64(data: str | bytes) -> str:
    """Encode data to base64"""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.b64encode(data).decode("utf-8")


def decode_base64(data: str) -> str:
    """Decode base64 to string"""
    return base64.b64decode(data, validate=True).decode("utf-8")


def normalize_numeric_fields(payment: dict[str, Any]) -> dict[str, Any]:
    """
    Copy of a raw header dict with integer authorization fields as decimal strings.

    Only the fields of the branch named by ``authorizationType`` are touched;
    SVM payloads pass through unchanged.
    """
    payload = payment.get("payload")
    if not isinstance(payload, dict):
        return dict(payment)

    fields = NUMERIC_AUTHORIZATION_FIELDS.get(payload.get("authorizationType", ""), ())
    authorization = payload.get("authorization")
    if not fields or not isinstance(authorization, dict):
        return dict(payment)

    authorization = dict(authorization)
    for field in fields:
        if field in authorization:
            authorization[field] = to_decimal_string(authorization[field])

    return {**payment, "payload": {**payload, "authorization": authorization}}


def _to_model(payment: dict[str, Any]) -> PaymentPayload:
    try:
        return PaymentPayload.model_validate(payment)
    except PydanticValidationError as e:
        raise PayloadValidationError(f"Invalid payment payload: {e}") from e


def encode_payment(payment: PaymentPayload | dict[str, Any]) -> str:
    """
    Encode a signed payment header to base64 for the X-PAYMENT HTTP header.

    Args:
        payment: PaymentPayload, or a raw dict that may carry integer fields

    Raises:
        UnsupportedNetworkError: Network is neither EVM nor SVM
        PayloadValidationError: Payload is unsigned or does not match its network family
    """
    if isinstance(payment, dict):
        payment = _to_model(normalize_numeric_fields(payment))

    family = NetworkConfig.get_network_family(payment.network)
    payload = payment.payload

    if family == "evm" and not isinstance(payload, _EVM_PAYLOADS):
        raise PayloadValidationError(f"EVM network {payment.network} requires an EVM payload")
    if family == "svm" and not isinstance(payload, ExactSvmPayload):
        raise PayloadValidationError(f"SVM network {payment.network} requires an SVM payload")
    if not payload.is_signed:
        raise PayloadValidationError("Cannot encode an unsigned payment payload")

    data = payment.model_dump(by_alias=True, exclude_none=True, mode="json")
    return encode_base64(json.dumps(data, separators=(",", ":")))


def decode_payment(encoded: str) -> PaymentPayload:
    """
    Decode a payment header produced by encode_payment.

    Raises:
        PayloadValidationError: Not base64, not JSON, or not a valid payment payload
    """
    try:
        data = json.loads(decode_base64(encoded))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise PayloadValidationError(f"Malformed payment header: {e}") from e
    if not isinstance(data, dict):
        raise PayloadValidationError("Malformed payment header: expected a JSON object")
    return _to_model(data)
