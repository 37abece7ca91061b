import ipaddress

import pytest

from gintonic.proxies import (
    TrustedProxies,
    parse_ip,
    prepare_trusted_cidrs,
)


def net(text):
    return ipaddress.ip_network(text, strict=False)


def test_default_trusts_everything():
    proxies = TrustedProxies()
    assert proxies.cidrs == [net("0.0.0.0/0"), net("::/0")]
    assert proxies.is_unsafe() is True


def test_valid_ipv4_cidr():
    proxies = TrustedProxies()
    proxies.set(["0.0.0.0/0"])
    assert proxies.cidrs == [net("0.0.0.0/0")]


def test_invalid_ipv4_cidr():
    proxies = TrustedProxies()
    with pytest.raises(ValueError):
        proxies.set(["192.168.1.33/33"])


def test_valid_ipv4_address():
    proxies = TrustedProxies()
    proxies.set(["192.168.1.33"])
    assert proxies.cidrs == [net("192.168.1.33/32")]


def test_invalid_ipv4_address():
    proxies = TrustedProxies()
    with pytest.raises(ValueError, match="invalid IP address: 192.168.1.256"):
        proxies.set(["192.168.1.256"])


def test_valid_ipv6_address():
    proxies = TrustedProxies()
    proxies.set(["2002:0000:0000:1234:abcd:ffff:c0a8:0101"])
    assert proxies.cidrs == [net("2002:0000:0000:1234:abcd:ffff:c0a8:0101/128")]


def test_invalid_ipv6_address():
    proxies = TrustedProxies()
    with pytest.raises(ValueError):
        proxies.set(["gggg:0000:0000:1234:abcd:ffff:c0a8:0101"])


def test_valid_ipv6_cidr():
    proxies = TrustedProxies()
    proxies.set(["::/0"])
    assert proxies.cidrs == [net("::/0")]


def test_invalid_ipv6_cidr():
    proxies = TrustedProxies()
    with pytest.raises(ValueError):
        proxies.set(["gggg:0000:0000:1234:abcd:ffff:c0a8:0101/129"])


def test_valid_combination():
    proxies = TrustedProxies()
    proxies.set(["::/0", "192.168.0.0/16", "172.16.0.1"])
    assert proxies.cidrs == [net("::/0"), net("192.168.0.0/16"), net("172.16.0.1/32")]


def test_invalid_combination_keeps_entries_before_error():
    proxies = TrustedProxies()
    with pytest.raises(ValueError):
        proxies.set(["::/0", "192.168.0.0/16", "172.16.0.256"])
    assert proxies.cidrs == [net("::/0"), net("192.168.0.0/16")]


def test_none_disables_trust():
    proxies = TrustedProxies()
    proxies.set(None)
    assert proxies.cidrs is None
    assert proxies.is_trusted("10.0.0.1") is False
    assert proxies.is_unsafe() is False


def test_netmask_form_rejected():
    with pytest.raises(ValueError):
        prepare_trusted_cidrs(["10.0.0.0/255.0.0.0"])


def test_prepare_trusted_cidrs_none_and_masking():
    assert prepare_trusted_cidrs(None) is None
    assert prepare_trusted_cidrs(["10.1.2.3/8"]) == [net("10.0.0.0/8")]


def test_parse_ip():
    assert parse_ip("1.2.3.4") == ipaddress.IPv4Address("1.2.3.4")
    assert parse_ip("::ffff:1.2.3.4") == ipaddress.IPv4Address("1.2.3.4")
    assert parse_ip("::1") == ipaddress.IPv6Address("::1")
    assert parse_ip("not-an-ip") is None
    assert parse_ip("fe80::1%eth0") is None


def test_is_unsafe_with_restricted_list():
    proxies = TrustedProxies(["192.168.0.0/16"])
    assert proxies.is_unsafe() is False
    assert proxies.is_trusted("192.168.3.4") is True
    assert proxies.is_trusted("10.0.0.1") is False


def test_ipv4_not_in_ipv6_any_network():
    proxies = TrustedProxies(["::/0"])
    assert proxies.is_trusted("1.2.3.4") is False
    assert proxies.is_trusted("2001:db8::1") is True


def test_mapped_address_matches_ipv4_network():
    proxies = TrustedProxies(["10.0.0.0/8"])
    assert proxies.is_trusted("::ffff:10.1.1.1") is True


def test_validate_header_single_entry():
    proxies = TrustedProxies()
    assert proxies.validate_header("20.20.20.20") == "20.20.20.20"


def test_validate_header_empty():
    assert TrustedProxies().validate_header("") is None


def test_validate_header_stops_at_untrusted():
    proxies = TrustedProxies(["20.20.20.20"])
    assert proxies.validate_header("10.0.0.1, 30.30.30.30, 20.20.20.20") == "30.30.30.30"


def test_validate_header_all_trusted_returns_leftmost():
    proxies = TrustedProxies()
    assert proxies.validate_header("10.0.0.1, 20.20.20.20") == "10.0.0.1"


def test_validate_header_invalid_entry_ends_search():
    proxies = TrustedProxies(["1.1.1.1"])
    assert proxies.validate_header("garbage, 1.1.1.1") is None


def test_validate_header_without_trust_returns_rightmost():
    proxies = TrustedProxies(None)
    assert proxies.validate_header("10.0.0.1, 20.20.20.20") == "20.20.20.20"