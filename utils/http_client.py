"""
HTTP client utilities with connection pooling.
Provides shared httpx clients for provider and auth calls.
"""
import httpx
from config import Config


class HTTPClientManager:
    """Manages shared httpx clients with connection pooling."""

    _provider_client: httpx.AsyncClient | None = None
    _auth_client: httpx.AsyncClient | None = None

    @classmethod
    def get_provider_client(cls) -> httpx.AsyncClient:
        """
        Get or create the shared client for LLM provider REST calls.

        Every request made with it is bounded by PROVIDER_TIMEOUT.

        Returns:
            Configured httpx.AsyncClient for provider calls
        """
        if cls._provider_client is None:
            limits = httpx.Limits(
                max_connections=Config.MAX_PROVIDER_CONNECTIONS,
                max_keepalive_connections=10,
                keepalive_expiry=60.0
            )

            cls._provider_client = httpx.AsyncClient(
                timeout=Config.PROVIDER_TIMEOUT,
                limits=limits,
                http2=True
            )

        return cls._provider_client

    @classmethod
    def get_auth_client(cls) -> httpx.AsyncClient:
        """
        Get or create the shared client for token verification.

        Returns:
            Configured httpx.AsyncClient for auth calls
        """
        if cls._auth_client is None:
            cls._auth_client = httpx.AsyncClient(
                timeout=Config.AUTH_TIMEOUT,
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                http2=True
            )

        return cls._auth_client

    @classmethod
    async def close_all(cls) -> None:
        """
        Close all managed clients and clean up connections.
        """
        if cls._provider_client is not None:
            await cls._provider_client.aclose()
            cls._provider_client = None

        if cls._auth_client is not None:
            await cls._auth_client.aclose()
            cls._auth_client = None
