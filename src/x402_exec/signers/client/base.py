"""
Client signer interfaces and capability model
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterable, Sequence

from x402_exec.exceptions import UnsupportedSignerError


class SignerCapability(str, Enum):
    """Operations a signer can perform"""

    ADDRESS = "address"
    SIGN_TYPED_DATA = "sign_typed_data"
    READ_CONTRACT = "read_contract"
    WRITE_CONTRACT = "write_contract"


KEY_PAIR_CAPABILITIES = frozenset({SignerCapability.ADDRESS, SignerCapability.SIGN_TYPED_DATA})

WALLET_CAPABILITIES = KEY_PAIR_CAPABILITIES | {
    SignerCapability.READ_CONTRACT,
    SignerCapability.WRITE_CONTRACT,
}


class ClientSigner(ABC):
    """
    Abstract base class for bare key-pair signers.

    Can report its address and produce EIP-712 signatures, nothing else.
    """

    def capabilities(self) -> frozenset[SignerCapability]:
        return KEY_PAIR_CAPABILITIES

    @abstractmethod
    def get_address(self) -> str | None:
        """Get the signer's account address, None when no account is attached"""
        pass

    @abstractmethod
    async def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, Any],
        message: dict[str, Any],
        primary_type: str,
    ) -> str:
        """
        Sign typed data (EIP-712).

        Args:
            domain: EIP-712 domain
            types: Type definitions (without EIP712Domain)
            message: Message to sign
            primary_type: Name of the message's struct type

        Returns:
            Signature string (0x-prefixed hex)
        """
        pass


class ConnectedClientSigner(ClientSigner):
    """
    Abstract base class for wallet-style signers connected to a chain.

    Adds contract reads, state-changing transactions and receipt waits.
    """

    def capabilities(self) -> frozenset[SignerCapability]:
        return WALLET_CAPABILITIES

    @abstractmethod
    async def read_contract(
        self,
        address: str,
        abi: list[dict[str, Any]],
        method: str,
        args: Sequence[Any] = (),
    ) -> Any:
        """
        Call a view function.

        Raises:
            ContractReadError: If the call fails
        """
        pass

    @abstractmethod
    async def write_contract(
        self,
        address: str,
        abi: list[dict[str, Any]],
        method: str,
        args: Sequence[Any] = (),
    ) -> str:
        """
        Submit a state-changing transaction from the signer's account.

        Returns:
            Transaction hash (0x-prefixed hex)

        Raises:
            TransactionFailedError: If the transaction cannot be submitted
        """
        pass

    @abstractmethod
    async def wait_for_transaction_receipt(
        self,
        tx_hash: str,
        timeout: float,
    ) -> dict[str, Any]:
        """
        Wait for a transaction to be mined.

        Raises:
            TransactionTimeoutError: If no receipt arrives within *timeout* seconds
        """
        pass


def require_capabilities(signer: Any, required: Iterable[SignerCapability]) -> None:
    """Reject *signer* unless it declares every capability in *required*.

    Raises:
        UnsupportedSignerError: Listing the missing capabilities
    """
    capabilities = getattr(signer, "capabilities", None)
    declared = frozenset(capabilities()) if callable(capabilities) else frozenset()
    missing = frozenset(required) - declared
    if missing:
        names = ", ".join(sorted(c.value for c in missing))
        raise UnsupportedSignerError(
            f"{type(signer).__name__} lacks required capabilities: {names}",
            missing=missing,
        )
