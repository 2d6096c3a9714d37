"""
RPC client side.

``RpcClient.send`` posts to a remote service's message pattern. A non-2xx
reply is handed to the reconciler, which rebuilds the remote
``DomainException``; transport faults (timeouts, refused connections)
propagate unchanged.
"""

from typing import Any, Dict, Optional

import httpx

from shared.config.settings import get_settings
from shared.errors.resolver import ErrorResolver
from shared.errors.rpc_reconciler import RpcErrorReconciler
from shared.i18n.context import get_language
from shared.utils.app_logger import get_logger

logger = get_logger(__name__)


class RpcClient:
    """HTTP client for one remote service's message patterns"""

    def __init__(
        self,
        base_url: str,
        *,
        service_name: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        resolver: Optional[ErrorResolver] = None,
    ):
        self.base_url = base_url
        self.service_name = service_name
        self.reconciler = RpcErrorReconciler(resolver=resolver)

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else get_settings().services.rpc_timeout,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            transport=transport,
        )

        logger.info(f"RPC client for {service_name} initialized with base URL: {self.base_url}")

    async def close(self):
        await self.client.aclose()

    async def send(self, pattern: str, data: Optional[Dict[str, Any]] = None) -> Any:
        """
        Invoke ``pattern`` on the remote service.

        Returns:
            The ``data`` member of the success reply

        Raises:
            DomainException: the remote service failed with a classified error
            httpx.RequestError: the call itself failed
        """
        headers = {}
        language = get_language()
        if language:
            headers["Accept-Language"] = language

        response = await self.client.post(f"/rpc/{pattern}", json={"data": data or {}}, headers=headers)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.info(f"{self.service_name} rpc {pattern} failed with {response.status_code}")
            raise self.reconciler.reconcile(exc) from exc

        if not response.text:
            return None
        body = response.json()
        return body.get("data") if isinstance(body, dict) else body
