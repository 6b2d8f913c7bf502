from beartype.typing import Any, Optional, Union

from . import config as CFG
from .exceptions import check_options
from .models import UNSET, PageProxyConfig, _Unset


class ProxyPage:
    def __init__(self, plugin, page):
        self.plugin = plugin
        self._page = page

    @property
    def playwright_page(self):
        return self._page

    @check_options
    async def use_proxy(
        self,
        proxy_url: Union[str, None, _Unset] = UNSET,
        *,
        only_navigation: Optional[bool] = None,
        intercept_resolution_priority: Optional[int] = None,
    ) -> PageProxyConfig:
        """Задает прокси для этой страницы (см. PageProxyPlugin.use_proxy)"""
        return await self.plugin.use_proxy(
            self._page,
            proxy_url,
            only_navigation=only_navigation,
            intercept_resolution_priority=intercept_resolution_priority,
        )

    @check_options
    async def lookup(
        self,
        lookup_service_url: str = CFG.DEFAULT_LOOKUP_SERVICE_URL,
        is_json: bool = True,
        timeout_ms: Union[int, float, str] = CFG.DEFAULT_LOOKUP_TIMEOUT_MS,
    ) -> Any:
        return await self.plugin.lookup(self._page, lookup_service_url, is_json, timeout_ms)

    async def close(self):
        """Закрывает страницу"""
        if self._page:
            await self._page.close()
            self._page = None
            self.plugin._logger.info(CFG.LOG_PAGE_CLOSED)
        else:
            self.plugin._logger.info(CFG.LOG_NO_PAGE_TO_CLOSE)
