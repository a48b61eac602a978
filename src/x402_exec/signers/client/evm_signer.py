"""
EVM client signers - local key-pair signer and web3-connected wallet signer
"""

import logging
from typing import Any, Sequence

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from x402_exec.exceptions import (
    ConfigurationError,
    ContractReadError,
    SignatureCreationError,
    TransactionFailedError,
    TransactionTimeoutError,
)
from x402_exec.signers.client.base import ClientSigner, ConnectedClientSigner
from x402_exec.signers.utils import (
    build_typed_data,
    resolve_provider_uri,
    to_hex,
    to_json_typed_data,
)

logger = logging.getLogger(__name__)


def _sign_typed_data_locally(
    account: LocalAccount,
    domain: dict[str, Any],
    types: dict[str, Any],
    message: dict[str, Any],
    primary_type: str,
) -> str:
    try:
        full_data = build_typed_data(domain, types, message, primary_type)
        encoded = encode_typed_data(full_message=full_data)
        signed = account.sign_message(encoded)
        return to_hex(signed.signature)
    except Exception as e:
        raise SignatureCreationError(f"Failed to sign typed data: {e}") from e


class EvmClientSigner(ClientSigner):
    """Bare key-pair signer using eth-account; cannot reach the chain"""

    def __init__(self, private_key: str) -> None:
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key
        self._account: LocalAccount = Account.from_key(private_key)
        logger.debug("EvmClientSigner initialized", extra={"address": self._account.address})

    @classmethod
    def from_private_key(cls, private_key: str) -> "EvmClientSigner":
        """Create signer from private key."""
        return cls(private_key)

    def get_address(self) -> str:
        return self._account.address

    async def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, Any],
        message: dict[str, Any],
        primary_type: str,
    ) -> str:
        return _sign_typed_data_locally(self._account, domain, types, message, primary_type)


class EvmWalletSigner(ConnectedClientSigner):
    """Wallet-style signer backed by web3.py.

    With a local account, signing and transaction signing happen in-process and
    the node only relays. Without one, the node's default account is used via
    ``eth_signTypedData_v4`` and ``eth_sendTransaction``.
    """

    def __init__(self, web3: Any, account: LocalAccount | None = None) -> None:
        self._web3 = web3
        self._account = account
        logger.debug(
            "EvmWalletSigner initialized",
            extra={"address": account.address if account else None},
        )

    @classmethod
    def from_private_key(cls, private_key: str, network: str) -> "EvmWalletSigner":
        """Create a signer for *network* (network name or RPC URL)."""
        from web3 import AsyncHTTPProvider, AsyncWeb3
        from web3.middleware import ExtraDataToPOAMiddleware

        provider_uri = resolve_provider_uri(network)
        if not provider_uri:
            raise ConfigurationError(f"No RPC URL configured for network: {network}")

        w3 = AsyncWeb3(AsyncHTTPProvider(provider_uri))
        w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        if not private_key.startswith("0x"):
            private_key = "0x" + private_key
        return cls(w3, Account.from_key(private_key))

    @property
    def web3(self) -> Any:
        return self._web3

    def get_address(self) -> str | None:
        if self._account is not None:
            return self._account.address
        default_account = self._web3.eth.default_account
        # web3 uses an Empty sentinel when no default account is configured
        if isinstance(default_account, str) and default_account:
            return default_account
        return None

    def _require_address(self) -> str:
        address = self.get_address()
        if not address:
            raise ConfigurationError("EvmWalletSigner has no account attached")
        return address

    async def sign_typed_data(
        self,
        domain: dict[str, Any],
        types: dict[str, Any],
        message: dict[str, Any],
        primary_type: str,
    ) -> str:
        if self._account is not None:
            return _sign_typed_data_locally(self._account, domain, types, message, primary_type)

        address = self._require_address()
        full_data = to_json_typed_data(build_typed_data(domain, types, message, primary_type))
        try:
            signature = await self._web3.eth.sign_typed_data(address, full_data)
        except Exception as e:
            raise SignatureCreationError(f"Wallet failed to sign typed data: {e}") from e
        return to_hex(signature)

    async def read_contract(
        self,
        address: str,
        abi: list[dict[str, Any]],
        method: str,
        args: Sequence[Any] = (),
    ) -> Any:
        try:
            contract = self._web3.eth.contract(address=to_checksum_address(address), abi=abi)
            return await getattr(contract.functions, method)(*args).call()
        except Exception as e:
            logger.error(
                "Contract read failed",
                extra={"contract": address, "method": method, "error": str(e)},
            )
            raise ContractReadError(f"Failed to call {method} on {address}: {e}") from e

    async def write_contract(
        self,
        address: str,
        abi: list[dict[str, Any]],
        method: str,
        args: Sequence[Any] = (),
    ) -> str:
        sender = self._require_address()
        w3 = self._web3
        try:
            contract = w3.eth.contract(address=to_checksum_address(address), abi=abi)
            call = getattr(contract.functions, method)(*args)

            if self._account is None:
                tx_hash = await call.transact({"from": sender})
            else:
                tx = await call.build_transaction(
                    {
                        "from": sender,
                        "nonce": await w3.eth.get_transaction_count(sender),
                        "chainId": await w3.eth.chain_id,
                    }
                )
                signed_tx = self._account.sign_transaction(tx)
                tx_hash = await w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except Exception as e:
            raise TransactionFailedError(f"Failed to submit {method} to {address}: {e}") from e

        tx_hash_hex = to_hex(tx_hash)
        logger.info(
            "Transaction submitted",
            extra={"contract": address, "method": method, "tx_hash": tx_hash_hex},
        )
        return tx_hash_hex

    async def wait_for_transaction_receipt(
        self,
        tx_hash: str,
        timeout: float,
    ) -> dict[str, Any]:
        from web3.exceptions import TimeExhausted

        try:
            receipt = await self._web3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        except TimeExhausted as e:
            raise TransactionTimeoutError(
                f"Transaction {tx_hash} not mined within {timeout} seconds"
            ) from e
        return dict(receipt)
