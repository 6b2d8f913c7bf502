"""
Proxy dispatcher.

Replays an intercepted request through a proxy with httpx and returns the
first-hop response untouched (status, raw headers, raw body).
"""

import logging
import time

import httpx
from beartype import beartype
from beartype.typing import Callable, Dict, List, Optional, Union

from . import config as CFG
from .exceptions import ProxyError, ProxyTimeoutError, check_options
from .models import HttpMethod, ProxiedResponse, ProxyURL, RequestOverrides
from .tools import parse_content_type, parse_proxy, validate_timeout


TransportFactory = Callable[[ProxyURL], httpx.AsyncBaseTransport]

# Everything httpx can raise for a single exchange
_EXCHANGE_ERRORS = (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError, OSError)


class ProxyDispatcher:
    """Выполняет перехваченный запрос через прокси"""

    @check_options
    def __init__(
        self,
        timeout: Union[int, float] = CFG.DEFAULT_DISPATCH_TIMEOUT,
        transport_factory: Optional[TransportFactory] = None,
    ) -> None:
        self.timeout = validate_timeout(timeout)
        self.transport_factory = transport_factory
        self._logger = logging.getLogger(self.__class__.__name__)

    def _build_client(self, proxy: ProxyURL) -> httpx.AsyncClient:
        options = {
            "timeout": self.timeout,
            "follow_redirects": False,
            "trust_env": False,
        }
        if self.transport_factory is not None:
            client = httpx.AsyncClient(transport=self.transport_factory(proxy), **options)
        else:
            client = httpx.AsyncClient(proxy=proxy.url, **options)
        # Only the browser's headers go out, no python-httpx defaults
        client.headers.clear()
        return client

    @staticmethod
    def _outbound_headers(headers: Dict[str, str]) -> Dict[str, str]:
        return {
            name: value
            for name, value in headers.items()
            if not name.startswith(CFG.PSEUDO_HEADER_PREFIX)
            and name.lower() not in CFG.DROPPED_REQUEST_HEADERS
        }

    @staticmethod
    def _collect_headers(response: httpx.Response) -> Dict[str, Union[str, List[str]]]:
        """Сырые заголовки ответа; повторяющиеся собираются в список"""
        collected: Dict[str, Union[str, List[str]]] = {}
        encoding = response.headers.encoding
        for raw_name, raw_value in response.headers.raw:
            name = raw_name.decode(encoding)
            value = raw_value.decode(encoding)
            if name not in collected:
                collected[name] = value
            elif isinstance(collected[name], list):
                collected[name].append(value)
            else:
                collected[name] = [collected[name], value]
        return collected

    async def _build_request(self, request, overrides: RequestOverrides) -> dict:
        method = overrides.method if overrides.method is not None else request.method
        if isinstance(method, HttpMethod):
            method = method.value

        headers = overrides.headers if overrides.headers is not None else await request.headers()
        content = overrides.post_data if overrides.post_data is not None else request.post_data
        if isinstance(content, str):
            content = content.encode()

        return {
            "method": method.upper(),
            "url": overrides.url if overrides.url is not None else request.url,
            "headers": self._outbound_headers(headers),
            "content": content,
        }

    @beartype
    async def dispatch(self, request, proxy_url: str, overrides: Optional[RequestOverrides] = None) -> ProxiedResponse:
        """
        Выполняет запрос через прокси.

        Args:
            request: перехваченный запрос (url, method, post_data, headers())
            proxy_url: адрес прокси, проверяется сразу (ConfigError)
            overrides: поля, заменяющие поля перехваченного запроса

        Returns:
            ProxiedResponse со статусом, заголовками и телом первого ответа (редиректы не отслеживаются)

        Raises:
            ProxyError: сетевая ошибка, ошибка TLS или некорректный ответ
            ProxyTimeoutError: превышен таймаут
        """
        proxy = parse_proxy(proxy_url)
        outbound = await self._build_request(request, overrides or RequestOverrides())
        self._logger.debug(f"{CFG.LOG_DISPATCH}: {outbound['method']} {outbound['url']} via {proxy}")

        start_time = time.time()
        try:
            async with self._build_client(proxy) as client:
                async with client.stream(**outbound) as response:
                    body = b"".join([chunk async for chunk in response.aiter_raw()])
                    headers = self._collect_headers(response)
                    status = response.status_code
        except httpx.TimeoutException as e:
            raise ProxyTimeoutError(CFG.ERROR_DISPATCH_TIMEOUT, proxy_url=str(proxy), cause=e) from e
        except _EXCHANGE_ERRORS as e:
            raise ProxyError(CFG.ERROR_DISPATCH_FAILED, proxy_url=str(proxy), cause=e) from e

        duration = time.time() - start_time
        content_type = parse_content_type(response.headers.get("content-type", ""))["content_type"]
        self._logger.debug(
            f"{CFG.LOG_DISPATCH_COMPLETED} {duration:.3f}s: {status} {content_type or '-'} {len(body)} bytes"
        )
        return ProxiedResponse(status=status, headers=headers, body=body)


@beartype
async def get_proxied_response(
    request,
    proxy_url: str,
    overrides: Optional[RequestOverrides] = None,
    timeout: Union[int, float] = CFG.DEFAULT_DISPATCH_TIMEOUT,
) -> ProxiedResponse:
    """Одноразовый вызов dispatcher'а без создания плагина"""
    return await ProxyDispatcher(timeout=timeout).dispatch(request, proxy_url, overrides)
