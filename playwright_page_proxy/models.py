from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from beartype import beartype
from beartype.typing import Dict, List, Optional, Protocol, Union


class _Unset:
    """Маркер "значение не задавалось" (в отличие от явного None)"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


class HttpMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@beartype
@dataclass(frozen=True)
class ProxyURL:
    """Разобранный и проверенный адрес прокси"""

    scheme: str
    host: str
    port: Optional[int] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def url(self) -> str:
        """URL в формате, который понимает HTTP-клиент"""
        return self._build(self.password)

    def _build(self, password: Optional[str]) -> str:
        auth = ""
        if self.username is not None:
            auth = f"{self.username}:{password}@"
        port = f":{self.port}" if self.port is not None else ""
        return f"{self.scheme}://{auth}{self.host}{port}"

    def __str__(self) -> str:
        return self._build("***" if self.password is not None else None)


@beartype
@dataclass(frozen=True)
class RequestOverrides:
    """Поля, которыми заменяются соответствующие поля перехваченного запроса"""

    url: Optional[str] = None
    method: Optional[Union[str, HttpMethod]] = None
    post_data: Optional[Union[str, bytes]] = None
    headers: Optional[Dict[str, str]] = None

    def is_empty(self) -> bool:
        return all(value is None for value in (self.url, self.method, self.post_data, self.headers))

    def as_kwargs(self) -> dict:
        """Аргументы для route.continue_/route.fallback"""
        kwargs = {}
        if self.url is not None:
            kwargs["url"] = self.url
        if self.method is not None:
            kwargs["method"] = self.method.value if isinstance(self.method, HttpMethod) else self.method
        if self.post_data is not None:
            kwargs["post_data"] = self.post_data
        if self.headers is not None:
            kwargs["headers"] = dict(self.headers)
        return kwargs


@beartype
@dataclass(frozen=True)
class ProxiedResponse:
    """Ответ, полученный через прокси. Отдается в route.fulfill как есть."""

    status: int
    headers: Dict[str, Union[str, List[str]]]
    body: bytes = b""

    def __str__(self) -> str:
        return f"ProxiedResponse(status={self.status}, headers={len(self.headers)}, size={len(self.body)} bytes)"


@beartype
@dataclass(frozen=True)
class PageProxyConfig:
    """Настройки прокси конкретной страницы. Перезаписываются целиком при каждом use_proxy."""

    proxy_url: Union[str, None, _Unset] = UNSET
    only_navigation: Optional[bool] = None
    intercept_resolution_priority: Optional[int] = None

    @property
    def opted_out(self) -> bool:
        # None или "" задано явно: страница не проксируется даже при глобальном прокси
        return self.proxy_url is not UNSET and not self.proxy_url


@beartype
@dataclass(frozen=True)
class GlobalProxyConfig:
    """Глобальные настройки плагина, задаются один раз при создании"""

    proxy_url: Optional[str] = None
    only_navigation: Optional[bool] = None
    intercept_resolution_priority: Optional[int] = None
    timeout: float = 30.0


@dataclass(frozen=True)
class EffectiveSettings:
    proxy_url: Optional[str]
    only_navigation: bool
    priority: Optional[int]
    opted_out: bool = False


class InterceptedRequest(Protocol):
    """
    Представление перехваченного запроса, которое дает хост.

    Методы is_intercept_resolution_handled() и continue_request_overrides()
    необязательны: если их нет, запрос считается не обработанным,
    а переопределений нет.
    """

    url: str
    method: str
    post_data: Optional[bytes]

    async def headers(self) -> Dict[str, str]: ...

    def is_navigation_request(self) -> bool: ...

    async def respond(self, response: ProxiedResponse, priority: Optional[int] = None) -> None: ...

    async def abort(self, error_code: str, priority: Optional[int] = None) -> None: ...

    async def continue_(self, overrides: Optional[RequestOverrides] = None, priority: Optional[int] = None) -> None: ...
