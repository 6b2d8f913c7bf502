import weakref

from beartype.typing import Optional, Union

from .exceptions import check_options
from .models import UNSET, PageProxyConfig, _Unset


class PageProxyRegistry:
    """
    Настройки прокси по страницам.

    Страницы хранятся по слабым ссылкам: запись исчезает вместе со страницей,
    а по событию close удаляется явно через evict().
    """

    def __init__(self) -> None:
        self._configs = weakref.WeakKeyDictionary()
        self._registered = weakref.WeakSet()

    @check_options
    def set_config(
        self,
        page,
        proxy_url: Union[str, None, _Unset] = UNSET,
        *,
        only_navigation: Optional[bool] = None,
        intercept_resolution_priority: Optional[int] = None,
    ) -> PageProxyConfig:
        # Last write wins: previous options are not merged in
        config = PageProxyConfig(
            proxy_url=proxy_url,
            only_navigation=only_navigation,
            intercept_resolution_priority=intercept_resolution_priority,
        )
        self._configs[page] = config
        return config

    def get_config(self, page) -> Optional[PageProxyConfig]:
        return self._configs.get(page)

    def is_registered(self, page) -> bool:
        """True, если на страницу уже повешен обработчик запросов"""
        return page in self._registered

    def mark_registered(self, page) -> None:
        self._registered.add(page)

    def unmark_registered(self, page) -> None:
        self._registered.discard(page)

    def evict(self, page) -> None:
        self._configs.pop(page, None)
        self._registered.discard(page)

    def __len__(self) -> int:
        return len(self._configs)
