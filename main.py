from playwright.async_api import async_playwright
from playwright_page_proxy import PageProxyPlugin, LookupTimeoutError
import asyncio
import sys


async def main(proxy_url: str):
    plugin = PageProxyPlugin(debug=True)

    async with async_playwright() as pw:
        browser = await pw.chromium.launch()
        context = await browser.new_context()
        await plugin.attach(context)

        page = plugin.wrap(await context.new_page())
        await page.playwright_page.goto("https://example.com/")

        # Сначала без прокси, затем через прокси
        print("Direct:", await page.lookup())
        await page.use_proxy(proxy_url)
        try:
            print("Proxied:", await page.lookup(timeout_ms=15000))
        except LookupTimeoutError as e:
            print("Lookup timed out:", e)

        await page.close()
        await browser.close()

if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "http://127.0.0.1:8080"))
