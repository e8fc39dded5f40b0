"""Tests for adapters.route_repository: print/add/remove against /ip/route."""

from __future__ import annotations

from ipaddress import ip_address

import pytest

from adapters.route_repository import RouterOSRouteRepository, describe_command, is_ip_literal
from core.domain.errors import InvalidArgumentError, QueryError
from core.domain.models import RouteRecord
from tests.fakes import FakeApi, FakeRouteResource


@pytest.fixture
def repository(fake_api: FakeApi) -> RouterOSRouteRepository:
    return RouterOSRouteRepository(fake_api)


class TestListRoutes:
    def test_maps_rows(self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository) -> None:
        route_resource.rows = [
            {"id": "*1", "dst-address": "93.184.216.34/32", "gateway": "192.168.1.1", "comment": "example.com"},
            {"id": "*2", "dst-address": "0.0.0.0/0", "gateway": "ether1"},
        ]

        routes = repository.list_routes()

        assert routes == [
            RouteRecord(id="*1", destination="93.184.216.34/32", gateway="192.168.1.1", comment="example.com"),
            RouteRecord(id="*2", destination="0.0.0.0/0", gateway="ether1", comment=""),
        ]
        assert route_resource.calls == [("print", {})]

    def test_filters_by_comment_server_side(
        self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository
    ) -> None:
        route_resource.rows = [
            {"id": "*1", "comment": "example.com"},
            {"id": "*2", "comment": "other.org"},
        ]

        routes = repository.list_routes(comment="example.com")

        assert [r.id for r in routes] == ["*1"]
        assert route_resource.calls == [("print", {"comment": "example.com"})]

    def test_dotted_id_key(self) -> None:
        record = RouteRecord.from_router_row({".id": "*9", "dst-address": "1.1.1.1/32"})
        assert record.id == "*9"
        assert record.gateway == ""

    def test_print_failure(self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository) -> None:
        route_resource.fail_print = True
        with pytest.raises(QueryError):
            repository.list_routes()


class TestAddRoute:
    def test_ip_gateway_gets_arp_check(
        self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository
    ) -> None:
        detail = repository.add_route(ip_address("93.184.216.34"), "192.168.1.1", "example.com")

        assert route_resource.mutations == [
            (
                "add",
                {
                    "dst_address": "93.184.216.34/32",
                    "gateway": "192.168.1.1",
                    "comment": "example.com",
                    "check_gateway": "arp",
                },
            )
        ]
        assert detail == (
            "/ip/route/add =dst-address=93.184.216.34/32 =gateway=192.168.1.1 "
            "=comment=example.com =check-gateway=arp"
        )

    def test_interface_gateway_has_no_arp_check(
        self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository
    ) -> None:
        repository.add_route(ip_address("93.184.216.34"), "eth1", "example.com")

        (_, params), = route_resource.mutations
        assert "check_gateway" not in params
        assert params["gateway"] == "eth1"

    def test_comment_is_escaped(self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository) -> None:
        repository.add_route(ip_address("10.1.1.1"), "eth1", "bad=comment")

        (_, params), = route_resource.mutations
        assert params["comment"] == "bad\\=comment"

    def test_ipv6_host_route(self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository) -> None:
        repository.add_route(ip_address("2001:db8::1"), "eth1", "example.com")

        (_, params), = route_resource.mutations
        assert params["dst_address"] == "2001:db8::1/128"

    def test_requires_destination(self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository) -> None:
        with pytest.raises(InvalidArgumentError):
            repository.add_route(None, "192.168.1.1", "example.com")
        assert route_resource.calls == []

    def test_requires_gateway(self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository) -> None:
        with pytest.raises(InvalidArgumentError):
            repository.add_route(ip_address("10.1.1.1"), "", "example.com")
        assert route_resource.calls == []

    def test_dry_run_does_not_touch_router(
        self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository
    ) -> None:
        detail = repository.add_route(ip_address("10.1.1.1"), "192.168.1.1", "example.com", dry_run=True)

        assert route_resource.calls == []
        assert detail.startswith("/ip/route/add =dst-address=10.1.1.1/32")

    def test_router_failure(self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository) -> None:
        route_resource.fail_add_addresses = {"10.1.1.1/32"}
        with pytest.raises(QueryError, match="bad gateway"):
            repository.add_route(ip_address("10.1.1.1"), "192.168.1.1", "example.com")


class TestRemoveRoute:
    def test_removes_by_id(self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository) -> None:
        route_resource.rows = [{"id": "*1", "comment": "example.com"}]

        detail = repository.remove_route("*1")

        assert route_resource.mutations == [("remove", {"id": "*1"})]
        assert route_resource.rows == []
        assert detail == "/ip/route/remove =numbers=*1"

    def test_dry_run(self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository) -> None:
        assert repository.remove_route("*1", dry_run=True) == "/ip/route/remove =numbers=*1"
        assert route_resource.calls == []

    def test_router_failure(self, route_resource: FakeRouteResource, repository: RouterOSRouteRepository) -> None:
        route_resource.fail_remove_ids = {"*1"}
        with pytest.raises(QueryError):
            repository.remove_route("*1")


class TestHelpers:
    @pytest.mark.parametrize(("value", "expected"), [("192.168.1.1", True), ("fe80::1", True), ("eth1", False), ("", False)])
    def test_is_ip_literal(self, value: str, expected: bool) -> None:
        assert is_ip_literal(value) is expected

    def test_describe_command(self) -> None:
        assert describe_command("remove", {"numbers": "*A"}) == "/ip/route/remove =numbers=*A"
