from beartype import BeartypeConf, beartype
from beartype.typing import Optional


class PageProxyError(Exception):
    """Базовое исключение пакета"""


class ConfigError(PageProxyError, ValueError):
    """Некорректный proxy URL или опции. Выбрасывается сразу при настройке."""


class ProxyError(PageProxyError):
    """Сетевая ошибка при обращении к прокси или через него"""

    @beartype
    def __init__(self, message: str, proxy_url: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.proxy_url = proxy_url
        self.cause = cause

    def __str__(self):
        if self.cause is not None:
            return f"{self.message}: {self.cause!r}"
        return self.message


class ProxyTimeoutError(ProxyError, TimeoutError):
    """Проксированный запрос не уложился в таймаут"""


class LookupTimeoutError(PageProxyError, TimeoutError):
    """Lookup-запрос не уложился в таймаут"""


class ParseError(PageProxyError, ValueError):
    """Ответ lookup-сервиса не удалось распарсить"""


class NetworkError(PageProxyError):
    """Класс для представления сетевых ошибок fetch внутри страницы"""

    @beartype
    def __init__(self, name: str, message: str, details: dict, timestamp: str, duration: float = 0.0):
        super().__init__(f"{name}: {message}")
        self.name = name
        self.message = message
        self.details = details
        self.timestamp = timestamp
        self.duration = duration

    def __str__(self):
        return f"NetworkError({self.name}: {self.message})"

    def __repr__(self):
        return f"NetworkError(name='{self.name}', message='{self.message}', timestamp='{self.timestamp}')"


# Type violations in setup calls are configuration errors
check_options = beartype(conf=BeartypeConf(violation_param_type=ConfigError))
