import re
from beartype import beartype
from beartype.typing import Any, Optional, Union
from . import config as CFG
from .exceptions import ConfigError, check_options
from .models import UNSET, EffectiveSettings, GlobalProxyConfig, PageProxyConfig, ProxyURL


_PROXY_RE = re.compile(CFG.PROXY)


@beartype
def parse_proxy(proxy_url: Any) -> ProxyURL:
    """
    Разбирает и проверяет адрес прокси вида scheme://[user:pass@]host[:port].

    Args:
        proxy_url: адрес прокси, схема обязательна (http, https, socks, socks5, socks5h)

    Returns:
        ProxyURL с нормализованной схемой (socks -> socks5)

    Raises:
        ConfigError: пустая строка, нет схемы, неподдерживаемая схема или неверный порт
    """
    if not isinstance(proxy_url, str) or not proxy_url.strip():
        raise ConfigError(f"{CFG.ERROR_PROXY_EMPTY}, got {proxy_url!r}")

    match = _PROXY_RE.match(proxy_url.strip())
    if not match:
        raise ConfigError(f"{CFG.ERROR_PROXY_MALFORMED}: {proxy_url!r}")

    scheme = match.group("scheme").lower()
    if scheme in CFG.UNSUPPORTED_PROXY_SCHEMES or scheme not in CFG.SUPPORTED_PROXY_SCHEMES:
        raise ConfigError(f"{CFG.ERROR_PROXY_SCHEME}: {scheme!r}")

    port = match.group("port")
    if port is not None:
        port = int(port)
        if not 0 < port <= CFG.MAX_PORT:
            raise ConfigError(f"{CFG.ERROR_PROXY_PORT}: {port}")

    return ProxyURL(
        scheme=CFG.SUPPORTED_PROXY_SCHEMES[scheme],
        host=match.group("host"),
        port=port,
        username=match.group("username"),
        password=match.group("password"),
    )


@beartype
def validate_priority(value: Any) -> Optional[int]:
    # bool is an int subclass, but True/False as a priority is a mistake
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{CFG.ERROR_PRIORITY_TYPE}, got {value!r}")
    return value


@beartype
def validate_timeout(value: Any) -> float:
    """Проверяет таймаут в секундах"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{CFG.ERROR_TIMEOUT_NOT_NUMBER}, got {value!r}")
    if value <= 0:
        raise ConfigError(CFG.ERROR_TIMEOUT_POSITIVE)
    if value > CFG.MAX_TIMEOUT_SECONDS:
        raise ConfigError(CFG.ERROR_TIMEOUT_TOO_LARGE)
    return float(value)


@check_options
def parse_timeout_ms(value: Union[int, float, str]) -> float:
    """Переводит таймаут в миллисекундах (число или строка) в секунды"""
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ConfigError(f"{CFG.ERROR_TIMEOUT_NOT_NUMBER}, got {value!r}") from None
    return validate_timeout(value / CFG.MILLISECONDS_MULTIPLIER)


def resolve_setting(page_value, global_value, default=None):
    """Page value, then global value, then the hardcoded default. Only None/UNSET fall through."""
    for value in (page_value, global_value):
        if value is not None and value is not UNSET:
            return value
    return default


@beartype
def resolve_settings(page_config: Optional[PageProxyConfig], global_config: GlobalProxyConfig) -> EffectiveSettings:
    if page_config is None:
        page_config = PageProxyConfig()

    if page_config.opted_out:
        proxy_url = None
    else:
        proxy_url = resolve_setting(page_config.proxy_url, global_config.proxy_url)

    return EffectiveSettings(
        proxy_url=proxy_url,
        only_navigation=resolve_setting(page_config.only_navigation, global_config.only_navigation, False),
        priority=resolve_setting(
            page_config.intercept_resolution_priority, global_config.intercept_resolution_priority
        ),
        opted_out=page_config.opted_out,
    )


@beartype
def parse_content_type(content_type: str) -> dict[str, str]:
    """
    Парсит строку Content-Type и возвращает словарь с основным типом и параметрами.

    Args:
        content_type: Content-Type из заголовков ответа (например, "text/html; charset=utf-8")

    Returns:
        Словарь с ключом 'content_type' для основного типа и всеми дополнительными параметрами
    """
    if not content_type:
        return {'content_type': '', 'charset': 'utf-8'}

    parts = [p.strip() for p in content_type.split(';')]

    result = {
        'content_type': parts[0].lower(),
        'charset': 'utf-8'
    }

    for part in parts[1:]:
        if not part:
            continue

        if '=' in part:
            key, value = part.split('=', 1)
            key = key.strip().lower()
            value = value.strip().strip('"\'')
            if key == 'charset':
                value = value.lower()
            result[key] = value
        else:
            result[part.lower()] = ''

    return result
