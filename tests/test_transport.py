import unittest

import aiohttp
from aiohttp import web
from aiohttp.test_utils import TestServer

from evm_api_mcp.transport import RequestController, encode_query


class TestEncodeQuery(unittest.TestCase):

    def test_encode_query(self):
        encoded = encode_query({"chain": "0x1", "token_addresses": ["0xa", "0xb"], "include": True, "limit": 10})
        self.assertEqual(encoded, [
            ("chain", "0x1"),
            ("token_addresses", "0xa"),
            ("token_addresses", "0xb"),
            ("include", "true"),
            ("limit", "10"),
        ])


class TestRequestController(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        app = web.Application()
        app.router.add_get("/items", self.handle_get)
        app.router.add_post("/items", self.handle_post)
        app.router.add_get("/missing", self.handle_missing)
        app.router.add_get("/plain", self.handle_plain)
        self.server = TestServer(app)
        await self.server.start_server()
        self.requests = RequestController(timeout=5)

    async def asyncTearDown(self):
        await self.server.close()

    async def handle_get(self, request):
        return web.json_response({
            "query": [[key, value] for key, value in request.query.items()],
            "api_key": request.headers.get("x-api-key"),
        })

    async def handle_post(self, request):
        return web.json_response({
            "query": dict(request.query),
            "body": await request.json(),
            "api_key": request.headers.get("x-api-key"),
        })

    async def handle_missing(self, request):
        return web.json_response({"message": "not found"}, status=404)

    async def handle_plain(self, request):
        return web.Response(text="plain")

    def url(self, path):
        return str(self.server.make_url(path))

    async def test_get_sends_query_and_headers(self):
        result = await self.requests.get(
            self.url("/items"), {"chain": "0x1", "token_addresses": ["0xa", "0xb"]}, headers={"x-api-key": "k"},
        )
        self.assertEqual(result["query"], [["chain", "0x1"], ["token_addresses", "0xa"], ["token_addresses", "0xb"]])
        self.assertEqual(result["api_key"], "k")

    async def test_post_sends_json_body(self):
        result = await self.requests.post(self.url("/items"), {"chain": "0x1"}, [1, 2, 3])
        self.assertEqual(result, {"query": {"chain": "0x1"}, "body": [1, 2, 3], "api_key": None})

    async def test_error_status_raises(self):
        with self.assertRaises(aiohttp.ClientResponseError) as ctx:
            await self.requests.get(self.url("/missing"), {})
        self.assertEqual(ctx.exception.status, 404)

    async def test_text_response(self):
        self.assertEqual(await self.requests.get(self.url("/plain"), {}), "plain")


if __name__ == '__main__':
    unittest.main()
