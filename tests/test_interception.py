import pytest
from playwright.async_api import Error as PlaywrightError

from playwright_page_proxy import ProxiedResponse, RequestOverrides, RouteRequestView
from .fakes import FakeContext, FakePage, FakePlaywrightRequest, FakeRoute


def make_view(error=None, **request_kwargs):
    route = FakeRoute(FakePlaywrightRequest(**request_kwargs), error=error)
    return RouteRequestView(route), route


@pytest.mark.asyncio
async def test_request_fields():
    view, _route = make_view(
        url="https://example.com/form",
        method="POST",
        headers={"cookie": "a=1"},
        post_data=b"x=1",
        navigation=False,
    )
    assert view.url == "https://example.com/form"
    assert view.method == "POST"
    assert view.post_data == b"x=1"
    assert await view.headers() == {"cookie": "a=1"}
    assert view.is_navigation_request() is False
    assert view.is_intercept_resolution_handled() is False
    assert view.continue_request_overrides() is None


@pytest.mark.asyncio
async def test_respond_fulfills_route():
    view, route = make_view()
    response = ProxiedResponse(
        status=404,
        headers={"x-test": "1", "set-cookie": ["a=1", "b=2"], "vary": ["accept", "origin"]},
        body=b"missing",
    )

    await view.respond(response)

    assert route.calls == [("fulfill", {
        "status": 404,
        "headers": {"x-test": "1", "set-cookie": "a=1\nb=2", "vary": "accept, origin"},
        "body": b"missing",
    })]
    assert view.is_intercept_resolution_handled() is True


@pytest.mark.asyncio
async def test_abort():
    view, route = make_view()
    await view.abort("failed", 1)
    assert route.calls == [("abort", {"error_code": "failed"})]


@pytest.mark.asyncio
async def test_continue_without_priority_uses_continue():
    view, route = make_view()
    await view.continue_(RequestOverrides(method="PUT", headers={"x": "1"}))
    assert route.calls == [("continue", {"method": "PUT", "headers": {"x": "1"}})]


@pytest.mark.asyncio
async def test_continue_with_priority_falls_back():
    view, route = make_view()
    await view.continue_(None, 0)
    assert route.calls == [("fallback", {})]


@pytest.mark.asyncio
async def test_second_resolution_is_ignored():
    view, route = make_view()
    await view.continue_()
    await view.abort("failed")
    assert route.call_names == ["continue"]


@pytest.mark.asyncio
async def test_playwright_error_on_closed_page_is_not_raised():
    view, route = make_view(error=PlaywrightError("Target page, context or browser has been closed"))
    await view.abort("failed")
    assert route.call_names == ["abort"]
    assert view.is_intercept_resolution_handled() is True


@pytest.mark.asyncio
async def test_cookies_come_from_context_when_missing():
    context = FakeContext(cookies=[
        {"name": "sid", "value": "abc", "domain": "example.com", "path": "/"},
        {"name": "lang", "value": "ru", "domain": "example.com", "path": "/"},
    ])
    route = FakeRoute(FakePlaywrightRequest(url="https://example.com/account", headers={"accept": "*/*"}))
    view = RouteRequestView(route, FakePage(context=context))

    headers = await view.headers()

    assert headers == {"accept": "*/*", "cookie": "sid=abc; lang=ru"}
    assert context.cookie_requests == ["https://example.com/account"]


@pytest.mark.asyncio
async def test_existing_cookie_header_is_kept():
    context = FakeContext(cookies=[{"name": "sid", "value": "other"}])
    route = FakeRoute(FakePlaywrightRequest(headers={"Cookie": "sid=abc"}))
    view = RouteRequestView(route, FakePage(context=context))

    assert await view.headers() == {"Cookie": "sid=abc"}
    assert context.cookie_requests == []


@pytest.mark.asyncio
async def test_empty_cookie_jar_adds_nothing():
    route = FakeRoute(FakePlaywrightRequest(headers={"accept": "*/*"}))
    view = RouteRequestView(route, FakePage(context=FakeContext()))

    assert await view.headers() == {"accept": "*/*"}
