import unittest

from evm_api_mcp.connection import ConnectionContext, ConnectionState
from evm_api_mcp.errors import ApiErrorCode, EvmApiError
from evm_api_mcp.resolvers import BodyType, EvmResolver, HTTPMethod, ResolverOptions
from tests.fakes import FakeConfig, FakeRequestController


def make_options(**overrides):
    values = dict(
        name="getBalances",
        get_path=lambda params: f"{params.get('address')}/erc20",
        parse_params=lambda params: dict(params),
        api_to_result=lambda data: data,
        result_to_json=lambda result: result,
    )
    values.update(overrides)
    return ResolverOptions(**values)


def make_resolver(options=None, config=None, context=None, requests=None):
    return EvmResolver(
        options or make_options(),
        config=config or FakeConfig(apiKey="test-key"),
        connection=ConnectionState(context) if context else ConnectionState(),
        requests=requests or FakeRequestController(),
        base_url="https://api.example/v2",
    )


CONNECTED = ConnectionContext(is_connected=True, chain=1, account="0xABC")


class TestParamClassification(unittest.TestCase):

    def test_get_sends_everything_as_query(self):
        resolver = make_resolver(make_options(body_params=("abi",)))
        params = {"chain": "0x1", "abi": ["x"]}
        self.assertEqual(resolver.get_search_params(params), {"chain": "0x1", "abi": ["x"]})
        self.assertEqual(resolver.get_body_params(params), {})

    def test_post_splits_body_and_query(self):
        resolver = make_resolver(make_options(method=HTTPMethod.POST, body_params=("abi", "params")))
        params = {"chain": "0x1", "abi": ["x"], "function_name": "name", "params": {"a": 1}}
        self.assertEqual(resolver.get_search_params(params), {"chain": "0x1", "function_name": "name"})
        self.assertEqual(resolver.get_body_params(params), {"abi": ["x"], "params": {"a": 1}})

    def test_post_without_body_params_uses_query_only(self):
        resolver = make_resolver(make_options(method=HTTPMethod.POST))
        params = {"chain": "0x1", "address": "0xabc"}
        self.assertEqual(resolver.get_search_params(params), params)
        self.assertEqual(resolver.get_body_params(params), {})

    def test_falsy_values_are_dropped(self):
        resolver = make_resolver(make_options(method=HTTPMethod.POST, body_params=("flag", "count")))
        params = {"address": "", "chain": "0x1", "limit": 0, "cursor": None, "flag": False, "count": 0}
        self.assertEqual(resolver.get_search_params(params), {"chain": "0x1"})
        self.assertEqual(resolver.get_body_params(params), {})

    def test_empty_address_is_dropped_under_get(self):
        resolver = make_resolver()
        self.assertEqual(resolver.get_search_params({"address": "", "chain": "0x1"}), {"chain": "0x1"})

    def test_body_type_replaces_whole_body(self):
        resolver = make_resolver(make_options(
            method=HTTPMethod.POST, body_params=("payload",), body_type=BodyType.BODY,
        ))
        params = {"payload": [1, 2, 3], "chain": "0x1"}
        self.assertEqual(resolver.get_body_params(params), [1, 2, 3])
        self.assertEqual(resolver.get_search_params(params), {"chain": "0x1"})

    def test_body_type_takes_last_truthy_body_value(self):
        resolver = make_resolver(make_options(
            method=HTTPMethod.POST, body_params=("a", "b"), body_type=BodyType.BODY,
        ))
        self.assertEqual(resolver.get_body_params({"a": [1], "b": "x", "c": 0}), "x")
        self.assertEqual(resolver.get_body_params({"a": [1], "b": ""}), [1])
        self.assertEqual(resolver.get_body_params({"a": None, "b": ""}), {})

    def test_key_order_follows_wire_params(self):
        resolver = make_resolver(make_options(method=HTTPMethod.POST, body_params=("b", "a")))
        params = {"z": "1", "a": "2", "y": "3", "b": "4"}
        self.assertEqual(list(resolver.get_search_params(params)), ["z", "y"])
        self.assertEqual(list(resolver.get_body_params(params)), ["a", "b"])

    def test_classification_is_repeatable(self):
        resolver = make_resolver(make_options(method=HTTPMethod.POST, body_params=("abi",)))
        params = {"chain": "0x1", "abi": ["x"]}
        first = (resolver.get_search_params(params), resolver.get_body_params(params))
        second = (resolver.get_search_params(params), resolver.get_body_params(params))
        self.assertEqual(first, second)
        self.assertEqual(params, {"chain": "0x1", "abi": ["x"]})


class TestDefaultParams(unittest.TestCase):

    def test_unconnected_empty_address_fails(self):
        resolver = make_resolver()
        with self.assertRaises(EvmApiError) as ctx:
            resolver.resolve_default_params({"address": None})
        self.assertEqual(ctx.exception.code, ApiErrorCode.GENERIC_API_ERROR)
        self.assertIn("address is required", str(ctx.exception))

    def test_unconnected_without_address_field_is_unchanged(self):
        resolver = make_resolver()
        self.assertEqual(resolver.resolve_default_params({"chain": "0x1"}), {"chain": "0x1"})

    def test_connected_fills_chain_and_address(self):
        resolver = make_resolver(context=CONNECTED)
        resolved = resolver.resolve_default_params({})
        self.assertEqual(resolved, {"chain": "0x1", "address": "0xabc"})

    def test_explicit_values_take_precedence(self):
        resolver = make_resolver(context=CONNECTED)
        resolved = resolver.resolve_default_params({"chain": "0x89", "address": "0xdef"})
        self.assertEqual(resolved, {"chain": "0x89", "address": "0xdef"})

    def test_caller_params_are_not_mutated(self):
        resolver = make_resolver(context=CONNECTED)
        params = {"address": None}
        resolver.resolve_default_params(params)
        self.assertEqual(params, {"address": None})


class TestFetch(unittest.IsolatedAsyncioTestCase):

    async def test_direct_get(self):
        requests = FakeRequestController(response=[{"balance": "1"}])
        resolver = make_resolver(requests=requests)

        adapter = await resolver.fetch({"address": "0xabc", "chain": "0x1", "cursor": ""})

        self.assertEqual(requests.calls, [{
            "method": "get",
            "url": "https://api.example/v2/0xabc/erc20",
            "params": {"address": "0xabc", "chain": "0x1"},
            "headers": {"x-api-key": "test-key"},
        }])
        self.assertEqual(adapter.raw, [{"balance": "1"}])

    async def test_path_is_built_once_per_call(self):
        paths = []

        def get_path(params):
            paths.append(params)
            return "0xabc/balance"

        resolver = make_resolver(make_options(get_path=get_path))
        await resolver.fetch({"address": "0xabc"})
        self.assertEqual(len(paths), 1)

    async def test_direct_post(self):
        requests = FakeRequestController(response="ok")
        options = make_options(method=HTTPMethod.POST, body_params=("abi",))
        resolver = make_resolver(options=options, requests=requests)

        await resolver.fetch({"address": "0xabc", "abi": [{"name": "f"}]})

        call = requests.calls[0]
        self.assertEqual(call["method"], "post")
        self.assertEqual(call["url"], "https://api.example/v2/0xabc/erc20")
        self.assertEqual(call["params"], {"address": "0xabc"})
        self.assertEqual(call["body"], {"abi": [{"name": "f"}]})
        self.assertEqual(call["headers"], {"x-api-key": "test-key"})

    async def test_server_request_without_api_key(self):
        requests = FakeRequestController(response={"result": {"balance": "5"}})
        resolver = make_resolver(config=FakeConfig(serverUrl="https://s.example"), requests=requests)

        adapter = await resolver.fetch({"address": "0xabc"})

        call = requests.calls[0]
        self.assertEqual(call["method"], "post")
        self.assertEqual(call["url"], "https://s.example/functions/getBalances")
        self.assertIsNone(call["headers"])
        self.assertEqual(adapter.raw, {"balance": "5"})

    async def test_server_request_is_post_even_for_get_operations(self):
        requests = FakeRequestController(response={"result": []})
        resolver = make_resolver(config=FakeConfig(serverUrl="https://s.example"), requests=requests)
        self.assertEqual(resolver.options.method, HTTPMethod.GET)

        await resolver.fetch({"address": "0xabc"})

        self.assertEqual(requests.calls[0]["method"], "post")

    async def test_missing_server_url_fails_before_request(self):
        requests = FakeRequestController()
        resolver = make_resolver(config=FakeConfig(), requests=requests)

        with self.assertRaises(EvmApiError) as ctx:
            await resolver.fetch({"address": "0xabc"})
        self.assertIn("start with apiKey or serverUrl", ctx.exception.message)
        self.assertEqual(requests.calls, [])

    async def test_missing_address_fails_before_request(self):
        requests = FakeRequestController()
        resolver = make_resolver(requests=requests)

        with self.assertRaises(EvmApiError):
            await resolver.fetch({"address": ""})
        self.assertEqual(requests.calls, [])

    async def test_connected_defaults_reach_the_query(self):
        requests = FakeRequestController(response=[])
        resolver = make_resolver(context=CONNECTED, requests=requests)

        await resolver.fetch({})

        self.assertEqual(requests.calls[0]["params"], {"chain": "0x1", "address": "0xabc"})

    async def test_transport_errors_propagate(self):
        error = ConnectionError("boom")
        resolver = make_resolver(requests=FakeRequestController(error=error))

        with self.assertRaises(ConnectionError) as ctx:
            await resolver.fetch({"address": "0xabc"})
        self.assertIs(ctx.exception, error)


if __name__ == '__main__':
    unittest.main()
