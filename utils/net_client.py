# net_client.py
import httpx
from utils.config_manager import NetworkConfig


class NetworkError(httpx.HTTPError):
    """Базовое исключение для всех сетевых ошибок"""
    def __init__(self, message: str, url: str | None = None, original_error: Exception | None = None):
        super().__init__(message)
        self.url = url
        self.original_error = original_error


class NetworkTimeoutError(NetworkError):
    """Превышен таймаут запроса"""
    pass


class NetworkConnectionError(NetworkError):
    """Ошибка соединения (нет сети, DNS, etc)"""
    pass


class NetClient:
    """Builds httpx clients that share the configured proxy."""

    def __init__(self, cfg: NetworkConfig | None = None):
        if cfg and cfg.proxy_enabled and cfg.proxy_url:
            self._proxy_url = cfg.proxy_url
        else:
            self._proxy_url = None

    @property
    def proxy_url(self) -> str | None:
        return self._proxy_url

    def create_async_httpx_client(self, *, base_url: str = "", headers: dict | None = None,
                                  timeout: httpx.Timeout | float | None = None,
                                  limits: httpx.Limits | None = None,
                                  **kwargs) -> httpx.AsyncClient:
        """
        Создаёт НОВЫЙ асинхронный httpx.AsyncClient
        с автоматически подставленным прокси + любыми доп. параметрами.
        """
        if timeout is None:
            timeout = httpx.Timeout(15.0, read=30.0, connect=10.0)
        if limits is None:
            limits = httpx.Limits(max_keepalive_connections=6, max_connections=6)

        return httpx.AsyncClient(
            proxy=self._proxy_url,
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            limits=limits,
            **kwargs,
        )

    @staticmethod
    def wrap_error(error: httpx.RequestError, url: str | None = None) -> NetworkError:
        """httpx.RequestError -> NetworkError hierarchy."""
        if isinstance(error, httpx.TimeoutException):
            return NetworkTimeoutError(f"Request timeout for {url}", url=url, original_error=error)
        if isinstance(error, httpx.ConnectError):
            return NetworkConnectionError(f"Connection failed for {url}", url=url, original_error=error)
        return NetworkError(f"Request failed for {url}", url=url, original_error=error)
