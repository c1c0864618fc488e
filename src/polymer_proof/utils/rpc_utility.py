import itertools
import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from ..exceptions import ProofQueryFailed, ProofRequestFailed, ProofRpcError

if TYPE_CHECKING:
    from ..models import ProofCoordinates

logger = logging.getLogger(__name__)


class ProofApiClient:
    """JSON-RPC 2.0 client for the Polymer proof API.

    Every call is a single HTTP POST to ``api_url``; nothing is cached or
    retried here.
    """

    REQUEST_PROOF_METHOD: str = "log_requestProof"
    QUERY_PROOF_METHOD: str = "log_queryProof"

    def __init__(
        self,
        api_url: str,
        api_key: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the proof API client.

        Args:
            api_url: JSON-RPC endpoint of the proof API
            api_key: Bearer credential sent with every request
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (unix socket, proxy, mock)
        """
        self.api_url: str = api_url
        self.api_key: str = api_key
        self.timeout: float = timeout
        self.transport: httpx.AsyncBaseTransport | None = transport
        self._request_ids = itertools.count(1)

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def call(self, method: str, params: list[Any], error_cls: type[ProofRpcError]) -> Any:
        """Perform one JSON-RPC call and return its ``result``.

        Args:
            method: JSON-RPC method name
            params: Positional parameters
            error_cls: Exception raised for any failure of this call

        Returns:
            The ``result`` member of the response

        Raises:
            ProofRpcError: ``error_cls`` on HTTP, transport, decoding or
                service-reported errors
        """
        payload: dict[str, Any] = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }
        logger.debug(f"Posting to {self.api_url}: {json.dumps(payload)}")

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response: httpx.Response = await client.post(self.api_url, json=payload, headers=self.headers)
        except httpx.HTTPError as e:
            logger.error(f"{method} transport error: {e}")
            raise error_cls(f"{method} request failed: {e}", method=method) from e

        if not response.is_success:
            logger.error(f"{method} returned HTTP {response.status_code}")
            raise error_cls(
                f"HTTP error! status: {response.status_code}",
                method=method,
                status_code=response.status_code,
            )

        try:
            data: Any = response.json()
        except ValueError as e:
            raise error_cls(f"{method} returned a non-JSON response", method=method) from e

        if not isinstance(data, dict):
            raise error_cls(f"{method} returned an invalid JSON-RPC envelope: {data!r}", method=method)

        if error := data.get("error"):
            logger.error(f"{method} service error: {error}")
            raise error_cls(
                f"Polymer API error: {json.dumps(error)}",
                method=method,
                status_code=response.status_code,
                rpc_error=error,
            )

        if "result" not in data:
            raise error_cls(f"{method} response has no result", method=method)

        return data["result"]

    async def request_proof(self, coordinates: "ProofCoordinates") -> str:
        """Submit a proof request and return the job ID issued by the service.

        The job ID is returned as the service sent it, except that a numeric
        ID is turned into its decimal string so handles are always ``str``.

        Raises:
            ProofRequestFailed: If the call fails or the result is not a job ID
        """
        params = coordinates.to_params()
        logger.debug(f"Requesting proof with params: {params}")

        result = await self.call(self.REQUEST_PROOF_METHOD, params, ProofRequestFailed)
        if isinstance(result, int) and not isinstance(result, bool):
            result = str(result)
        if not isinstance(result, str) or not result:
            raise ProofRequestFailed(
                f"Invalid job ID returned by {self.REQUEST_PROOF_METHOD}: {result!r}",
                method=self.REQUEST_PROOF_METHOD,
            )
        return result

    async def query_proof(self, job_id: str) -> dict[str, Any]:
        """Fetch the raw status object of a proof job.

        Raises:
            ProofQueryFailed: If the call fails or the result is not an object
        """
        logger.debug(f"Querying proof status for job: {job_id}")

        result = await self.call(self.QUERY_PROOF_METHOD, [job_id], ProofQueryFailed)
        if not isinstance(result, dict):
            raise ProofQueryFailed(
                f"Invalid status returned by {self.QUERY_PROOF_METHOD}: {result!r}",
                method=self.QUERY_PROOF_METHOD,
            )
        return result
