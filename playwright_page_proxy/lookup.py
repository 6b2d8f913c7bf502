import asyncio
import json
import logging
import os
import time
from functools import lru_cache

from beartype.typing import Any, Union
from playwright.async_api import Error as PlaywrightError

from . import config as CFG
from .exceptions import LookupTimeoutError, NetworkError, ParseError, check_options
from .tools import parse_timeout_ms


logger = logging.getLogger("Lookup")


@lru_cache(maxsize=1)
def load_lookup_script() -> str:
    script_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), CFG.LOOKUP_FETCH_JS_FILE)
    try:
        with open(script_path, "r") as file:
            return file.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"{CFG.ERROR_JS_FILE_NOT_FOUND}: {script_path}")


async def _evaluate(page, url: str, timeout: float) -> dict:
    script = load_lookup_script()
    args = {"url": url, "timeout": int(timeout * CFG.MILLISECONDS_MULTIPLIER)}
    try:
        return await page.evaluate(script, args)
    except PlaywrightError as e:
        # Page navigated while the lookup was running
        if CFG.CONTEXT_DESTROYED_MESSAGE not in str(e):
            raise
        logger.debug(CFG.LOG_LOOKUP_RETRY)
        return await page.evaluate(script, args)


@check_options
async def lookup(
    page,
    lookup_service_url: str = CFG.DEFAULT_LOOKUP_SERVICE_URL,
    is_json: bool = True,
    timeout_ms: Union[int, float, str] = CFG.DEFAULT_LOOKUP_TIMEOUT_MS,
) -> Any:
    """
    Запрашивает lookup-сервис изнутри страницы.

    По умолчанию это https://api64.ipify.org?format=json: без format=json
    ipify отвечает простым текстом, а режим is_json=True ожидает {"ip": ...}.

    Запрос выполняется fetch'ем в контексте страницы, поэтому проходит через
    ее перехватчик и, соответственно, через настроенный для нее прокси.

    Args:
        page: playwright Page или ProxyPage
        lookup_service_url: адрес сервиса
        is_json: распарсить ответ как JSON (иначе вернуть текст)
        timeout_ms: жесткий лимит в миллисекундах (число или строка)

    Returns:
        Распарсенный JSON или текст ответа

    Raises:
        LookupTimeoutError: превышен timeout_ms
        ParseError: is_json=True, а ответ не является JSON
        NetworkError: fetch внутри страницы завершился ошибкой
    """
    timeout = parse_timeout_ms(timeout_ms)
    page = getattr(page, "playwright_page", page)

    logger.debug(f"{CFG.LOG_LOOKUP} {lookup_service_url} (timeout {timeout:.3f}s)")
    start_time = time.time()
    try:
        result = await asyncio.wait_for(_evaluate(page, lookup_service_url, timeout), timeout=timeout)
    except asyncio.TimeoutError as e:
        raise LookupTimeoutError(f"{CFG.ERROR_LOOKUP_TIMEOUT} {timeout_ms} ms: {lookup_service_url}") from e
    duration = time.time() - start_time

    if not result.get("success", False):
        error_info = result.get("error", {})
        if error_info.get("name") == CFG.ABORT_ERROR_NAME:
            raise LookupTimeoutError(f"{CFG.ERROR_LOOKUP_TIMEOUT} {timeout_ms} ms: {lookup_service_url}")
        raise NetworkError(
            name=error_info.get("name", CFG.ERROR_UNKNOWN),
            message=error_info.get("message", CFG.ERROR_MESSAGE_UNKNOWN),
            details=error_info.get("details", {}),
            timestamp=error_info.get("timestamp", ""),
            duration=duration,
        )

    text = result["response"]["text"]
    logger.info(f"{CFG.LOG_LOOKUP_COMPLETED} {duration:.3f}s")

    if not is_json:
        return text
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"{CFG.ERROR_LOOKUP_PARSE}: {text[:100]!r}") from e
