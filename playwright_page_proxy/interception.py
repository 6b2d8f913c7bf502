"""Adapter exposing a Playwright route as an intercepted request view."""

import logging

from beartype import beartype
from beartype.typing import Dict, Optional
from playwright.async_api import Error as PlaywrightError

from . import config as CFG
from .models import ProxiedResponse, RequestOverrides


class RouteRequestView:
    """
    Обертка над playwright Route.

    Playwright не знает числовых приоритетов: если приоритет задан
    (кооперативный режим), continue выполняется через route.fallback(),
    чтобы остальные обработчики страницы тоже могли обработать запрос.
    """

    def __init__(
        self,
        route,
        page=None,
        overrides: Optional[RequestOverrides] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._route = route
        self._page = page
        self._overrides = overrides
        self._handled = False
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def route(self):
        return self._route

    @property
    def url(self) -> str:
        return self._route.request.url

    @property
    def method(self) -> str:
        return self._route.request.method

    @property
    def post_data(self) -> Optional[bytes]:
        return self._route.request.post_data_buffer

    async def _context_cookie_header(self) -> Optional[str]:
        context = getattr(self._page, "context", None)
        if context is None:
            return None
        cookies = await context.cookies(self.url)
        if not cookies:
            return None
        return CFG.COOKIE_SEPARATOR.join(f"{cookie['name']}={cookie['value']}" for cookie in cookies)

    async def headers(self) -> Dict[str, str]:
        headers = dict(await self._route.request.all_headers())
        # Paused requests carry no cookie header yet, take it from the context jar
        if not any(name.lower() == CFG.COOKIE_HEADER for name in headers):
            cookie_header = await self._context_cookie_header()
            if cookie_header:
                headers[CFG.COOKIE_HEADER] = cookie_header
        return headers

    def is_navigation_request(self) -> bool:
        return self._route.request.is_navigation_request()

    def is_intercept_resolution_handled(self) -> bool:
        return self._handled

    def continue_request_overrides(self) -> Optional[RequestOverrides]:
        return self._overrides

    @staticmethod
    def _fulfill_headers(response: ProxiedResponse) -> Dict[str, str]:
        headers = {}
        for name, value in response.headers.items():
            if isinstance(value, list):
                separator = CFG.SET_COOKIE_SEPARATOR if name.lower() == CFG.SET_COOKIE_HEADER else CFG.HEADER_VALUE_SEPARATOR
                value = separator.join(value)
            headers[name] = value
        return headers

    async def _resolve(self, action: str, priority: Optional[int], call) -> None:
        if self._handled:
            self._logger.warning(f"{CFG.LOG_ROUTE_ALREADY_RESOLVED}: {action} {self.url}")
            return
        self._handled = True
        if priority is not None:
            self._logger.debug(f"{CFG.LOG_PRIORITY_HINT} {priority} for {action} {self.url}")
        try:
            await call()
        except PlaywrightError as e:
            self._logger.warning(f"{CFG.LOG_ROUTE_RESOLVE_FAILED} ({action}) {self.url}: {e}")

    @beartype
    async def respond(self, response: ProxiedResponse, priority: Optional[int] = None) -> None:
        await self._resolve(
            "respond",
            priority,
            lambda: self._route.fulfill(
                status=response.status,
                headers=self._fulfill_headers(response),
                body=response.body,
            ),
        )

    @beartype
    async def abort(self, error_code: str = CFG.ABORT_ERROR_CODE, priority: Optional[int] = None) -> None:
        await self._resolve("abort", priority, lambda: self._route.abort(error_code))

    @beartype
    async def continue_(self, overrides: Optional[RequestOverrides] = None, priority: Optional[int] = None) -> None:
        kwargs = overrides.as_kwargs() if overrides is not None else {}
        if priority is None:
            await self._resolve("continue", priority, lambda: self._route.continue_(**kwargs))
        else:
            await self._resolve("fallback", priority, lambda: self._route.fallback(**kwargs))
