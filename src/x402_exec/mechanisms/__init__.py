"""
Authorization scheme mechanisms
"""

from x402_exec.mechanisms.base import SchemeMechanism, SignResult
from x402_exec.mechanisms.builder import (
    default_mechanisms,
    prepare_payment_header,
    resolve_authorization_type,
    select_mechanism,
)
from x402_exec.mechanisms.eip3009 import Eip3009Mechanism
from x402_exec.mechanisms.permit import PermitMechanism
from x402_exec.mechanisms.permit2 import Permit2Mechanism

__all__ = [
    "Eip3009Mechanism",
    "Permit2Mechanism",
    "PermitMechanism",
    "SchemeMechanism",
    "SignResult",
    "default_mechanisms",
    "prepare_payment_header",
    "resolve_authorization_type",
    "select_mechanism",
]
