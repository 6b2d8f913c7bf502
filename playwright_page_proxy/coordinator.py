import logging

from beartype import beartype
from beartype.typing import Callable, Optional

from . import config as CFG
from .dispatcher import ProxyDispatcher
from .exceptions import ProxyError
from .models import GlobalProxyConfig, RequestOverrides
from .registry import PageProxyRegistry
from .tools import resolve_settings


class InterceptionCoordinator:
    """
    Обработчик перехваченных запросов страницы.

    Для каждого запроса решает: пропустить без изменений (continue),
    выполнить через прокси (respond) или оборвать (abort). На каждый
    запрос выдается ровно одно завершающее действие.

    request должен реализовывать models.InterceptedRequest.
    """

    @beartype
    def __init__(
        self,
        registry: PageProxyRegistry,
        global_config: Callable[[], GlobalProxyConfig],
        dispatcher: ProxyDispatcher,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.registry = registry
        self._global_config = global_config
        self.dispatcher = dispatcher
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @staticmethod
    def _already_handled(request) -> bool:
        check = getattr(request, "is_intercept_resolution_handled", None)
        return bool(check()) if callable(check) else False

    @staticmethod
    def _continue_overrides(request) -> Optional[RequestOverrides]:
        get_overrides = getattr(request, "continue_request_overrides", None)
        return get_overrides() if callable(get_overrides) else None

    async def on_request(self, page, request) -> None:
        if self._already_handled(request):
            self._logger.debug(f"{CFG.LOG_ALREADY_HANDLED}: {request.url}")
            return

        settings = resolve_settings(self.registry.get_config(page), self._global_config())
        self._logger.debug(
            f"{CFG.LOG_ON_REQUEST}: {request.method} {request.url} "
            f"proxy={'opted-out' if settings.opted_out else settings.proxy_url} "
            f"only_navigation={settings.only_navigation} priority={settings.priority}"
        )

        # Opt-out is checked before the navigation filter
        if (
            settings.opted_out
            or not settings.proxy_url
            or (settings.only_navigation and not request.is_navigation_request())
        ):
            self._logger.debug(f"{CFG.LOG_CONTINUE}: {request.url}")
            await request.continue_(self._continue_overrides(request), settings.priority)
            return

        try:
            response = await self.dispatcher.dispatch(request, settings.proxy_url)
        except ProxyError as e:
            self._logger.warning(f"{CFG.LOG_PROXY_ERROR} {request.url}: {e}")
            await request.abort(CFG.ABORT_ERROR_CODE, settings.priority)
            return
        except Exception:
            await request.abort(CFG.ABORT_ERROR_CODE, settings.priority)
            raise

        self._logger.debug(f"{CFG.LOG_PROXY_RESPONSE} {request.url}: {response}")
        await request.respond(response, settings.priority)
