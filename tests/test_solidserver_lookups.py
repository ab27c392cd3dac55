"""Tests for name to ID lookups."""

import pytest

from solidserver_ipam.server.solidserver_lookups import SOLIDserverLookups


@pytest.fixture
def lookups(fake_server):
    return SOLIDserverLookups(fake_server)


class TestSpaceAndSubnetLookups:

    def test_space_id_by_name(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{"site_id": "2", "site_name": "lab"}])]

        assert lookups.space_id_by_name("LAB") == "2"
        assert fake_server.calls[0] == ("get", "rest/ip_site_list", {"WHERE": "site_name='lab'"})

    def test_space_not_found(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [])]

        assert lookups.space_id_by_name("lab") is None

    def test_subnet_id_by_name(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{"subnet_id": "42"}])]

        assert lookups.subnet_id_by_name("2", "Servers", terminal=False) == "42"
        assert fake_server.calls[0] == (
            "get", "rest/ip_block_subnet_list",
            {"WHERE": "site_id='2' AND subnet_name='servers' AND is_terminal='0'"}
        )

    def test_subnet_info_by_name(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{
            "subnet_id": "42",
            "subnet_name": "servers",
            "subnet_size": "256",
            "start_ip_addr": "0a000100",
            "end_ip_addr": "0a0001ff",
            "is_terminal": "1",
            "subnet_level": "2",
        }])]

        info = lookups.subnet_info_by_name("2", "servers")

        assert info.id == "42"
        assert info.size == 256
        assert info.prefix_length == 24
        assert info.start_addr == "10.0.1.0"
        assert info.end_addr == "10.0.1.255"
        assert info.start_hex_addr == "0a000100"
        assert info.terminal == "1"
        assert info.level == "2"

    def test_subnet_info_not_found_on_error_status(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(400, [{"errmsg": "denied"}])]

        assert lookups.subnet_info_by_name("2", "servers") is None

    def test_subnet6_info_by_name(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{
            "subnet6_id": "64",
            "subnet6_name": "v6-servers",
            "subnet6_prefix": "64",
            "start_ip6_addr": "20010db8000100000000000000000000",
            "end_ip6_addr": "20010db80001ffffffffffffffffffff",
        }])]

        info = lookups.subnet6_info_by_name("2", "v6-servers")

        assert info.id == "64"
        assert info.prefix_length == 64
        assert info.start_addr == "2001:0db8:0001:0000:0000:0000:0000:0000"
        assert fake_server.calls[0][1] == "rest/ip6_block6_subnet6_list"


class TestPoolLookups:

    def test_pool_id_by_name(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{"pool_id": "7"}])]

        assert lookups.pool_id_by_name("2", "DHCP", "Servers") == "7"
        assert fake_server.calls[0] == (
            "get", "rest/ip_pool_list",
            {"WHERE": "site_id='2' AND pool_name='dhcp' AND subnet_name='servers'"}
        )

    def test_pool_info_by_name(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{
            "pool_id": "7", "pool_name": "dhcp", "pool_size": "100",
            "start_ip_addr": "0a000164", "end_ip_addr": "0a0001c7",
        }])]

        info = lookups.pool_info_by_name("2", "dhcp", "servers")

        assert info.id == "7"
        assert info.size == 100
        assert info.start_addr == "10.0.1.100"
        assert info.end_addr == "10.0.1.199"

    def test_pool6_id_by_name(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{"pool6_id": "9"}])]

        assert lookups.pool6_id_by_name("2", "slaac", "v6-servers") == "9"
        assert fake_server.calls[0][2] == {
            "WHERE": "site_id='2' AND pool6_name='slaac' AND subnet6_name='v6-servers'"
        }


class TestAddressAndObjectLookups:

    def test_address_id_by_ip(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{"ip_id": "1001"}])]

        assert lookups.address_id_by_ip("2", "10.0.1.5") == "1001"
        assert fake_server.calls[0] == (
            "get", "rest/ip_used_address_list", {"WHERE": "site_id='2' AND ip_addr='0a000105'"}
        )

    def test_invalid_address_is_not_sent(self, lookups, fake_server):
        assert lookups.address_id_by_ip("2", "10.0.1.500") is None
        assert fake_server.calls == []

    def test_address6_id_by_ip6(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{"ip6_id": "2002"}])]

        assert lookups.address6_id_by_ip6("2", "2001:db8::5") == "2002"
        assert fake_server.calls[0][2] == {
            "WHERE": "site_id='2' AND ip6_addr='20010db8000000000000000000000005'"
        }

    def test_vlan_domain_id_by_name(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{"vlmdomain_id": "3"}])]

        assert lookups.vlan_domain_id_by_name("DC1") == "3"
        assert fake_server.calls[0] == ("get", "rest/vlmdomain_list", {"WHERE": "vlmdomain_name='dc1'"})

    def test_vlan_oid_by_info(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{"vlmvlan_id": "55"}])]

        assert lookups.vlan_oid_by_info("dc1", 100) == "55"
        assert fake_server.calls[0][2] == {"WHERE": "vlmdomain_name='dc1' AND vlmvlan_vlan_id='100'"}

    def test_vlan_oid_by_info_keeps_domain_case(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{"vlmvlan_id": "56"}])]

        assert lookups.vlan_oid_by_info("DC1", 100) == "56"
        assert fake_server.calls[0][2] == {"WHERE": "vlmdomain_name='DC1' AND vlmvlan_vlan_id='100'"}

    def test_device_id_by_name(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{"hostdev_id": "8"}])]

        assert lookups.device_id_by_name("Switch-01") == "8"
        assert fake_server.calls[0][2] == {"WHERE": "hostdev_name='switch-01'"}

    def test_record_without_id_is_not_found(self, lookups, fake_server, make_answer):
        fake_server.responses = [make_answer(200, [{"hostdev_name": "switch-01"}])]

        assert lookups.device_id_by_name("switch-01") is None
