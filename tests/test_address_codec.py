"""Tests for the address codec."""

import pytest

from solidserver_ipam.utils.address_codec import (
    ip_to_hex_ip, hex_ip_to_ip, ip_to_long, long_to_ip, ip_to_ptr,
    ip6_to_hex_ip6, hex_ip6_to_ip6, long_ip6_to_short_ip6, short_ip6_to_long_ip6, ip6_to_ptr,
    prefix_length_to_size, size_to_prefix_length, prefix_length_to_hex_ip,
    prefix_length_to_netmask, prefix6_length_to_size,
)


class TestIPv4:
    """Tests for IPv4 conversions."""

    def test_ip_to_hex_ip(self):
        assert ip_to_hex_ip("10.0.0.1") == "0a000001"
        assert ip_to_hex_ip("192.168.1.10") == "c0a8010a"
        assert ip_to_hex_ip("255.255.255.255") == "ffffffff"

    def test_hex_ip_to_ip_accepts_both_cases(self):
        assert hex_ip_to_ip("0A000001") == "10.0.0.1"
        assert hex_ip_to_ip("c0a8010a") == "192.168.1.10"

    @pytest.mark.parametrize("address", ["0.0.0.0", "10.0.0.1", "172.16.254.3", "255.255.255.255"])
    def test_round_trips(self, address):
        assert hex_ip_to_ip(ip_to_hex_ip(address)) == address
        assert long_to_ip(ip_to_long(address)) == address

    @pytest.mark.parametrize("address", [
        "", "10.0.0", "10.0.0.256", "10.0.0.1.2", "a.b.c.d", "10.0.0.-1", "1234.0.0.1", "10.0.0.1\n",
    ])
    def test_invalid_address_fails_closed(self, address):
        assert ip_to_hex_ip(address) == ""
        assert ip_to_long(address) == 0
        assert ip_to_ptr(address) == ""

    @pytest.mark.parametrize("hex_ip", ["", "0a00001", "0a0000011", "zz000001", "0a000001\n", None])
    def test_invalid_hex_fails_closed(self, hex_ip):
        assert hex_ip_to_ip(hex_ip) == ""

    def test_long_conversions(self):
        assert ip_to_long("10.0.0.1") == 167772161
        assert ip_to_long("255.255.255.255") == 4294967295
        assert long_to_ip(3232235786) == "192.168.1.10"

    def test_long_to_ip_out_of_range(self):
        assert long_to_ip(-1) == ""
        assert long_to_ip(2 ** 32) == ""

    def test_ip_to_ptr(self):
        assert ip_to_ptr("192.168.1.10") == "10.1.168.192.in-addr.arpa"


class TestIPv6:
    """Tests for IPv6 conversions."""

    def test_ip6_to_hex_ip6_pads_every_group(self):
        assert ip6_to_hex_ip6("2001:db8::1") == "20010db8000000000000000000000001"

    def test_hex_ip6_to_ip6_is_fully_expanded(self):
        assert hex_ip6_to_ip6("20010db8000000000000000000000001") == "2001:0db8:0000:0000:0000:0000:0000:0001"

    @pytest.mark.parametrize("address", ["2001:db8::1", "::1", "fe80::abcd:1234", "::"])
    def test_round_trips(self, address):
        expanded = hex_ip6_to_ip6(ip6_to_hex_ip6(address))
        assert long_ip6_to_short_ip6(expanded) == address
        assert short_ip6_to_long_ip6(address) == expanded

    def test_invalid_input_fails_closed(self):
        assert ip6_to_hex_ip6("2001:db8:::1") == ""
        assert ip6_to_hex_ip6("10.0.0.1") == ""
        assert hex_ip6_to_ip6("20010db8") == ""
        assert hex_ip6_to_ip6("20010db8000000000000000000000001\n") == ""
        assert long_ip6_to_short_ip6("nope") == ""
        assert short_ip6_to_long_ip6("") == ""
        assert ip6_to_ptr("nope") == ""

    def test_ip6_to_ptr_reverses_nibbles(self):
        ptr = ip6_to_ptr("2001:db8::1")
        assert ptr == "1." + "0." * 23 + "8.b.d.0.1.0.0.2.ip6.arpa"

    def test_ip6_to_ptr_accepts_expanded_form(self):
        assert ip6_to_ptr("2001:0db8:0000:0000:0000:0000:0000:0001") == ip6_to_ptr("2001:db8::1")


class TestPrefixMath:
    """Tests for CIDR helpers."""

    def test_prefix_length_to_size(self):
        assert prefix_length_to_size(24) == 256
        assert prefix_length_to_size(32) == 1
        assert prefix_length_to_size(0) == 2 ** 32

    def test_prefix_length_to_size_out_of_range(self):
        assert prefix_length_to_size(33) == -1
        assert prefix_length_to_size(-1) == -1

    @pytest.mark.parametrize("length", range(0, 33))
    def test_size_prefix_length_idempotent(self, length):
        assert size_to_prefix_length(prefix_length_to_size(length)) == length

    @pytest.mark.parametrize("size", [3, 100, 300, 1000, 65535])
    def test_non_power_of_two_rounds_down(self, size):
        assert prefix_length_to_size(size_to_prefix_length(size)) <= size

    def test_size_to_prefix_length_examples(self):
        assert size_to_prefix_length(300) == 24
        assert size_to_prefix_length(1) == 32

    def test_netmask(self):
        assert prefix_length_to_hex_ip(24) == "ffffff00"
        assert prefix_length_to_hex_ip(0) == "00000000"
        assert prefix_length_to_netmask(20) == "255.255.240.0"
        assert prefix_length_to_hex_ip(40) == ""

    def test_prefix6_length_to_size(self):
        assert prefix6_length_to_size(64) == 16 ** 16
        assert prefix6_length_to_size(0) == 16 ** 32
        assert prefix6_length_to_size(128) == 1

    @pytest.mark.parametrize("length", [-4, 129, 200, "64", None])
    def test_prefix6_length_out_of_range(self, length):
        assert prefix6_length_to_size(length) == -1
