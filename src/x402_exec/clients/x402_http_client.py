"""
X402HttpClient - HTTP client adapter with automatic 402 payment handling
"""

import logging
from typing import Any, Callable, Sequence

import httpx
from pydantic import ValidationError as PydanticValidationError

from x402_exec.clients.x402_exec_client import X402ExecClient
from x402_exec.exceptions import ConfigurationError
from x402_exec.types import PaymentRequired, PaymentRequirements

logger = logging.getLogger(__name__)


PAYMENT_HEADER = "X-PAYMENT"
PAYMENT_RESPONSE_HEADER = "X-PAYMENT-RESPONSE"

PaymentRequirementsSelector = Callable[
    [Sequence[PaymentRequirements]], PaymentRequirements | None
]


class X402HttpClient:
    """
    HTTP client adapter with automatic 402 payment handling.

    Wraps httpx.AsyncClient: a 402 response is answered once with an X-PAYMENT
    header built by the exec client. A second 402 is returned to the caller.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        exec_client: X402ExecClient,
        selector: PaymentRequirementsSelector | None = None,
    ) -> None:
        """
        Initialize HTTP client adapter.

        Args:
            http_client: httpx.AsyncClient instance
            exec_client: X402ExecClient that signs the payment header
            selector: Picks one of the offered requirements (default: first supported)
        """
        self._http_client = http_client
        self._exec_client = exec_client
        self._selector = selector

    async def request_with_payment(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make HTTP request with automatic 402 payment handling.

        Flow:
            1. Send original request
            2. If 402, parse the x402 body
            3. Select requirements and build the payment header
            4. Retry once with X-PAYMENT header
        """
        logger.info(f"Making {method} request to {url}")
        response = await self._http_client.request(method, url, **kwargs)
        logger.info(f"Received response: status={response.status_code}")

        if response.status_code != 402:
            return response

        payment_required = self._parse_payment_required(response)
        if payment_required is None:
            logger.error("Failed to parse PaymentRequired from 402 response")
            return response

        logger.info(f"Parsed PaymentRequired with {len(payment_required.accepts)} payment options")
        requirements = self._select(payment_required.accepts)

        header = await self._exec_client.create_payment_header(
            payment_required.x402_version, requirements
        )

        headers = dict(kwargs.pop("headers", None) or {})
        headers[PAYMENT_HEADER] = header
        logger.info("Retrying request with payment header")
        response = await self._http_client.request(method, url, headers=headers, **kwargs)
        logger.info(f"Payment retry response: status={response.status_code}")
        return response

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """GET request with payment handling"""
        return await self.request_with_payment("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """POST request with payment handling"""
        return await self.request_with_payment("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        """PUT request with payment handling"""
        return await self.request_with_payment("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        """DELETE request with payment handling"""
        return await self.request_with_payment("DELETE", url, **kwargs)

    def _parse_payment_required(self, response: httpx.Response) -> PaymentRequired | None:
        """Parse PaymentRequired from 402 response body"""
        try:
            body = response.json()
        except ValueError as e:
            logger.warning(f"402 response body is not JSON: {e}")
            return None

        if not isinstance(body, dict) or not isinstance(body.get("accepts"), list):
            logger.warning("Response body does not contain valid PaymentRequired structure")
            return None

        try:
            return PaymentRequired.model_validate(body)
        except PydanticValidationError as e:
            logger.warning(f"Invalid PaymentRequired body: {e}")
            return None

    def _select(self, accepts: Sequence[PaymentRequirements]) -> PaymentRequirements:
        if self._selector is not None:
            selected = self._selector(accepts)
        else:
            selected = next((r for r in accepts if self._exec_client.supports(r)), None)
        if selected is None:
            offered = ", ".join(f"{r.network}/{r.authorization_type}" for r in accepts)
            raise ConfigurationError(
                f"No offered payment requirements can be paid by this client: {offered}"
            )
        return selected
