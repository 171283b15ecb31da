"""Tests for route key parsing."""

import pytest

from http_event_source.errors import RouteKeyError
from http_event_source.routing import parse_route_key, to_endpoint


class TestParseRouteKey:
    def test_simple_route(self) -> None:
        key = parse_route_key("http.get./health")

        assert key.raw == "http.get./health"
        assert key.protocol == "http"
        assert key.method == "GET"
        assert key.template == "/health"
        assert key.endpoint == "/health"
        assert key.params == ()

    def test_placeholders_become_colon_params(self) -> None:
        key = parse_route_key("http.post./orders/{orderId}/items/{itemId}")

        assert key.method == "POST"
        assert key.endpoint == "/orders/:orderId/items/:itemId"
        assert key.router_path == "/orders/{orderId}/items/{itemId}"
        assert key.params == ("orderId", "itemId")

    def test_template_may_contain_dots(self) -> None:
        key = parse_route_key("http.get./files/{name}.json")

        assert key.template == "/files/{name}.json"
        assert key.endpoint == "/files/:name.json"

    def test_method_is_case_insensitive(self) -> None:
        assert parse_route_key("http.DELETE./orders/{id}").method == "DELETE"

    @pytest.mark.parametrize(
        "route",
        [
            "http.get",
            "http..",
            "get./orders",
            ".get./orders",
            "http.get.",
        ],
    )
    def test_wrong_segment_count_rejected(self, route: str) -> None:
        with pytest.raises(RouteKeyError, match="expected"):
            parse_route_key(route)

    def test_unknown_method_rejected(self) -> None:
        with pytest.raises(RouteKeyError, match="unsupported HTTP method"):
            parse_route_key("http.fetch./orders")

    def test_options_left_to_cors(self) -> None:
        with pytest.raises(RouteKeyError):
            parse_route_key("http.options./orders")

    def test_relative_path_rejected(self) -> None:
        with pytest.raises(RouteKeyError, match="must start with '/'"):
            parse_route_key("http.get.orders")

    @pytest.mark.parametrize(
        "template",
        [
            "/orders/{{orderId}}",
            "/orders/{orderId",
            "/orders/orderId}",
            "/orders/{}",
            "/orders/{id:\\d+}",
            "/orders/{order-id}",
        ],
    )
    def test_malformed_placeholders_rejected(self, template: str) -> None:
        with pytest.raises(RouteKeyError, match="placeholders"):
            parse_route_key(f"http.get.{template}")

    def test_duplicate_placeholders_rejected(self) -> None:
        with pytest.raises(RouteKeyError, match="duplicate"):
            parse_route_key("http.get./a/{id}/b/{id}")

    def test_error_carries_route_key(self) -> None:
        with pytest.raises(RouteKeyError) as exc_info:
            parse_route_key("nonsense")

        assert exc_info.value.route_key == "nonsense"
        assert "nonsense" in str(exc_info.value)


def test_to_endpoint_leaves_plain_paths_alone() -> None:
    assert to_endpoint("/a/b/c") == "/a/b/c"
    assert to_endpoint("/users/{userId}") == "/users/:userId"
