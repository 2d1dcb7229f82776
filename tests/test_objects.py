# Copyright (c) 2014, Palo Alto Networks
#
# Permission to use, copy, modify, and/or distribute this software for any
# purpose with or without fee is hereby granted, provided that the above
# copyright notice and this permission notice appear in all copies.
#
# THE SOFTWARE IS PROVIDED "AS IS" AND THE AUTHOR DISCLAIMS ALL WARRANTIES
# WITH REGARD TO THIS SOFTWARE INCLUDING ALL IMPLIED WARRANTIES OF
# MERCHANTABILITY AND FITNESS. IN NO EVENT SHALL THE AUTHOR BE LIABLE FOR
# ANY SPECIAL, DIRECT, INDIRECT, OR CONSEQUENTIAL DAMAGES OR ANY DAMAGES
# WHATSOEVER RESULTING FROM LOSS OF USE, DATA OR PROFITS, WHETHER IN AN
# ACTION OF CONTRACT, NEGLIGENCE OR OTHER TORTIOUS ACTION, ARISING OUT OF
# OR IN CONNECTION WITH THE USE OR PERFORMANCE OF THIS SOFTWARE.

import unittest
import xml.etree.ElementTree as ET

import pytest

import panconfig.errors as err
import panconfig.objects as Objects
from panconfig.objects import Address, AddressGroup, Service, ServiceGroup, Tag


VSYS1 = "/config/devices/entry[@name='localhost.localdomain']/vsys/entry[@name='vsys1']"
DG = "/config/devices/entry[@name='localhost.localdomain']/device-group/entry[@name='%s']"


def _listing(category, *entries):
    return "<%s>%s</%s>" % (category, "".join(entries), category)


# Creating


def test_create_address_on_firewall(fw, device):
    device.respond_success()

    fw.objects.create_address("web1", "ip", "10.1.1.5/32", description="web server")

    assert device.last == {
        "type": "config",
        "action": "set",
        "xpath": VSYS1 + "/address/entry[@name='web1']",
        "element": "<ip-netmask>10.1.1.5/32</ip-netmask><description>web server</description>",
        "key": "secret",
    }
    assert device.requests[0].use_get is False


def test_create_address_in_device_group(pano, device):
    device.respond_success()

    pano.objects.create_address("r1", "range", "10.0.0.1-10.0.0.9", devicegroup="branch")

    assert device.last["xpath"] == DG % "branch" + "/address/entry[@name='r1']"
    assert device.last["element"] == "<ip-range>10.0.0.1-10.0.0.9</ip-range>"


def test_create_shared_fqdn(pano, device):
    device.respond_success()

    pano.objects.create_address("site", "fqdn", "www.example.com", shared=True)

    assert device.last["xpath"] == "/config/shared/address/entry[@name='site']"
    assert device.last["element"] == "<fqdn>www.example.com</fqdn>"


def test_create_on_panorama_without_device_group(pano, device):
    with pytest.raises(err.ConfigError) as excinfo:
        pano.objects.create_address("web1", "ip", "10.1.1.5")

    assert "device-group required" in str(excinfo.value)
    assert device.requests == []


def test_create_shared_on_firewall(fw, device):
    with pytest.raises(err.ConfigError):
        fw.objects.create_tag("t1", shared=True)

    assert device.requests == []


def test_create_address_bad_type(fw, device):
    with pytest.raises(err.ConfigError):
        fw.objects.create_address("web1", "mac", "00:11:22:33:44:55")

    assert device.requests == []


def test_create_address_without_name(fw, device):
    with pytest.raises(err.ConfigError):
        fw.objects.create_address("", "ip", "10.1.1.5")

    assert device.requests == []


def test_create_twice_sends_identical_requests(fw, device):
    device.respond_success()
    device.respond_success()

    fw.objects.create_address("web1", "ip", "10.1.1.5")
    fw.objects.create_address("web1", "ip", "10.1.1.5")

    assert device.queries[0] == device.queries[1]


def test_create_static_group(fw, device):
    device.respond_success()

    fw.objects.create_static_group("web", "web1, web2", description="all web")

    assert device.last["xpath"] == VSYS1 + "/address-group/entry[@name='web']"
    assert device.last["element"] == (
        "<static><member>web1</member><member>web2</member></static>"
        "<description>all web</description>")


def test_create_static_group_without_members(fw, device):
    with pytest.raises(err.ConfigError):
        fw.objects.create_static_group("web", [])

    assert device.requests == []


def test_create_dynamic_group(pano, device):
    device.respond_success()

    pano.objects.create_dynamic_group("vms", "'vm-servers' or 'pcs'", devicegroup="dc")

    assert device.last["xpath"] == DG % "dc" + "/address-group/entry[@name='vms']"
    assert device.last["element"] == (
        "<dynamic><filter>'vm-servers' or 'pcs'</filter></dynamic>")


def test_create_service(fw, device):
    device.respond_success()

    fw.objects.create_service("https-alt", "tcp", 8443, description="alt")

    assert device.last["xpath"] == VSYS1 + "/service/entry[@name='https-alt']"
    assert device.last["element"] == (
        "<protocol><tcp><port>8443</port></tcp></protocol><description>alt</description>")


def test_create_service_bad_protocol(fw, device):
    with pytest.raises(err.ConfigError):
        fw.objects.create_service("icmp", "icmp", 0)


def test_create_service_group(fw, device):
    device.respond_success()

    fw.objects.create_service_group("web-services", ["https-alt", "http-alt"])

    assert device.last["xpath"] == VSYS1 + "/service-group/entry[@name='web-services']"
    assert device.last["element"] == (
        "<members><member>https-alt</member><member>http-alt</member></members>")


def test_create_tag(fw, device):
    device.respond_success()

    fw.objects.create_tag("servers", color="light green", comments="all servers")

    assert device.last["xpath"] == VSYS1 + "/tag/entry[@name='servers']"
    assert device.last["element"] == (
        "<color>color9</color><comments>all servers</comments>")


def test_create_tag_bad_color(fw, device):
    with pytest.raises(err.ConfigError):
        fw.objects.create_tag("servers", color="Pink")

    assert device.requests == []


def test_create_rejected(fw, device):
    device.respond_error("12", "Invalid object")

    with pytest.raises(err.OperationError) as excinfo:
        fw.objects.create_address("web1", "ip", "not-an-ip")

    assert excinfo.value.code == "12"


# Deleting


@pytest.mark.parametrize("method, category", [
    ("delete_address", "address"),
    ("delete_address_group", "address-group"),
    ("delete_service", "service"),
    ("delete_service_group", "service-group"),
    ("delete_tag", "tag"),
])
def test_delete_in_device_group(pano, device, method, category):
    device.respond_success()

    getattr(pano.objects, method)("obj1", devicegroup="dg1")

    assert device.last == {
        "type": "config",
        "action": "delete",
        "xpath": DG % "dg1" + "/%s/entry[@name='obj1']" % (category,),
        "key": "secret",
    }


def test_delete_missing_object(fw, device):
    device.respond_error("7", "No such node")

    with pytest.raises(err.OperationError) as excinfo:
        fw.objects.delete_address("missing")

    assert "Object not present" in str(excinfo.value)
    assert excinfo.value.code == "7"


# Listing


def test_addresses_on_firewall(fw, device):
    device.respond_success(_listing(
        "address",
        '<entry name="web1"><ip-netmask>10.1.1.5/32</ip-netmask>'
        "<description>web server</description></entry>",
        '<entry name="r1"><ip-range>10.0.0.1-10.0.0.9</ip-range></entry>',
        '<entry name="site"><fqdn>www.example.com</fqdn></entry>',
    ))

    ret_val = fw.objects.addresses()

    assert ret_val == [
        Address("web1", "ip", "10.1.1.5/32", "web server"),
        Address("r1", "range", "10.0.0.1-10.0.0.9"),
        Address("site", "fqdn", "www.example.com"),
    ]
    assert device.last == {
        "type": "config", "action": "get", "xpath": VSYS1 + "/address", "key": "secret"}
    assert device.requests[0].use_get is True


def test_addresses_on_managed_firewall(managed_fw, device):
    device.respond_success()

    ret_val = managed_fw.objects.addresses()

    assert ret_val == []
    assert device.last["xpath"] == "/config/panorama//address"


def test_addresses_on_panorama(pano, device):
    device.respond_success()

    pano.objects.addresses()

    assert device.last["xpath"] == "/config/devices/entry//address"


def test_address_groups_in_device_group(pano, device):
    device.respond_success(_listing(
        "address-group",
        '<entry name="web"><static><member>web1</member><member>web2</member></static>'
        "</entry>",
        '<entry name="vms"><dynamic><filter>\'vm\'</filter></dynamic>'
        "<description>dynamic</description></entry>",
    ))

    ret_val = pano.objects.address_groups(devicegroup="dc")

    assert ret_val == [
        AddressGroup("web", "static", ["web1", "web2"]),
        AddressGroup("vms", "dynamic", filter="'vm'", description="dynamic"),
    ]
    assert device.last["xpath"] == DG % "dc" + "/address-group"


def test_services_shared(pano, device):
    device.respond_success(_listing(
        "service",
        '<entry name="dns"><protocol><udp><port>53</port></udp></protocol></entry>',
    ))

    ret_val = pano.objects.services(shared=True)

    assert ret_val == [Service("dns", "udp", "53")]
    assert device.last["xpath"] == "/config/shared/service"


def test_service_groups(fw, device):
    device.respond_success(_listing(
        "service-group",
        '<entry name="web"><members><member>http</member><member>https</member></members>'
        "</entry>",
    ))

    ret_val = fw.objects.service_groups()

    assert ret_val == [ServiceGroup("web", ["http", "https"])]


def test_tags(fw, device):
    device.respond_success(_listing(
        "tag",
        '<entry name="servers"><color>color1</color><comments>all</comments></entry>',
        '<entry name="plain"/>',
        '<entry name="odd"><color>color42</color></entry>',
    ))

    ret_val = fw.objects.tags()

    assert ret_val == [
        Tag("servers", "Red", "all"),
        Tag("plain"),
        Tag("odd", "color42"),
    ]
    assert device.last["xpath"] == VSYS1 + "/tag"


def test_list_with_device_group_on_firewall(fw, device):
    with pytest.raises(err.ConfigError):
        fw.objects.tags(devicegroup="dg1")

    assert device.requests == []


def test_list_error(fw, device):
    device.respond_error("16", "Unauthorized")

    with pytest.raises(err.OperationError):
        fw.objects.addresses()


# Tagging


def test_apply_tag_to_address(fw, device):
    device.respond_success(_listing(
        "address", '<entry name="web1"><ip-netmask>10.1.1.5</ip-netmask></entry>'))
    device.respond_success()

    fw.objects.apply_tag("servers, web", "web1")

    assert len(device.requests) == 2
    assert device.last == {
        "type": "config",
        "action": "edit",
        "xpath": VSYS1 + "/address/entry[@name='web1']/tag",
        "element": "<tag><member>servers</member><member>web</member></tag>",
        "key": "secret",
    }


def test_apply_tag_search_order(pano, device):
    device.respond_success()
    device.respond_success(_listing(
        "address-group", '<entry name="web"><static><member>a</member></static></entry>'))
    device.respond_success()

    pano.objects.apply_tag(["servers"], "web", devicegroup="dc")

    assert [q["xpath"] for q in device.queries] == [
        DG % "dc" + "/address",
        DG % "dc" + "/address-group",
        DG % "dc" + "/address-group/entry[@name='web']/tag",
    ]


def test_apply_tag_to_service_group(fw, device):
    device.respond_success()
    device.respond_success()
    device.respond_success()
    device.respond_success(_listing(
        "service-group", '<entry name="web"><members><member>http</member></members></entry>'))
    device.respond_success()

    fw.objects.apply_tag("servers", "web")

    assert device.last["xpath"] == VSYS1 + "/service-group/entry[@name='web']/tag"


def test_apply_tag_address_wins_over_service(fw, device):
    device.respond_success(_listing(
        "address", '<entry name="dual"><fqdn>dual.example.com</fqdn></entry>'))
    device.respond_success()

    fw.objects.apply_tag("servers", "dual")

    assert len(device.requests) == 2
    assert device.last["xpath"] == VSYS1 + "/address/entry[@name='dual']/tag"


def test_apply_tag_object_not_found(fw, device):
    for _ in range(4):
        device.respond_success()

    with pytest.raises(err.ObjectNotFound):
        fw.objects.apply_tag("servers", "missing")

    assert len(device.requests) == 4
    assert all(q["action"] == "get" for q in device.queries)


def test_apply_tag_on_panorama_without_device_group(pano, device):
    with pytest.raises(err.ConfigError):
        pano.objects.apply_tag("servers", "web1")

    assert device.requests == []


def test_apply_tag_without_tags(fw, device):
    with pytest.raises(err.ConfigError):
        fw.objects.apply_tag("", "web1")


def test_remove_tag(pano, device):
    device.respond_success(_listing(
        "address", '<entry name="web1"><ip-netmask>10.1.1.5</ip-netmask></entry>'))
    device.respond_success()

    pano.objects.remove_tag("servers", "web1", shared=True)

    assert device.last == {
        "type": "config",
        "action": "delete",
        "xpath": "/config/shared/address/entry[@name='web1']/tag/member[text()='servers']",
        "key": "secret",
    }
    assert device.requests[1].use_get is False


def test_remove_tag_object_not_found(pano, device):
    for _ in range(4):
        device.respond_success()

    with pytest.raises(err.ObjectNotFound):
        pano.objects.remove_tag("servers", "missing", devicegroup="dc")


class TestRecords(unittest.TestCase):
    def test_address_round_trip(self):
        obj = Address("web1", "ip", "10.1.1.5/32", "web server")

        self.assertEqual(obj, Address.parse(obj.element()))

    def test_address_group_round_trip(self):
        obj = AddressGroup("web", "static", ["web1", "web2"], description="web")

        self.assertEqual(obj, AddressGroup.parse(obj.element()))

    def test_service_round_trip(self):
        obj = Service("alt", "udp", "1000-2000", source_port="53")

        self.assertEqual(obj, Service.parse(obj.element()))

    def test_tag_round_trip(self):
        obj = Tag("servers", "Blue Gray", "comments")

        self.assertEqual(obj, Tag.parse(obj.element()))

    def test_address_element(self):
        expected = '<entry name="web1"><ip-netmask>10.1.1.5</ip-netmask></entry>'

        ret_val = ET.tostring(Address("web1", "ip", "10.1.1.5").element(), encoding="unicode")

        self.assertEqual(expected, ret_val)

    def test_members_from_string(self):
        group = ServiceGroup("web", " http ,, https ")

        self.assertEqual(["http", "https"], group.members)

    def test_dynamic_group_without_filter(self):
        self.assertRaises(err.ConfigError, AddressGroup("vms", "dynamic").element)

    def test_unknown_group_type(self):
        self.assertRaises(err.ConfigError, AddressGroup("g", "mixed", ["a"]).element)

    def test_service_without_port(self):
        self.assertRaises(err.ConfigError, Service("s", "tcp", None).element)


class TestColors(unittest.TestCase):
    def test_color_code(self):
        self.assertEqual("color1", Objects.color_code("Red"))

    def test_color_code_any_case(self):
        self.assertEqual("color12", Objects.color_code("blue gray"))

    def test_color_code_passes_codes(self):
        self.assertEqual("color16", Objects.color_code("color16"))

    def test_unknown_color(self):
        self.assertRaises(err.ConfigError, Objects.color_code, "Pink")

    def test_color_name(self):
        self.assertEqual("Light Green", Objects.color_name("color9"))

    def test_every_color_has_a_unique_code(self):
        codes = list(Objects.TAG_COLORS.values())

        self.assertEqual(16, len(set(codes)))


def test_created_element_lists_back(fw, device):
    device.respond_success()
    fw.objects.create_static_group("web", ["web1", "web2"], description="all web")
    element = device.last["element"]
    device.respond_success(_listing("address-group", '<entry name="web">%s</entry>' % element))

    ret_val = fw.objects.address_groups()

    assert ret_val == [AddressGroup("web", "static", ["web1", "web2"], description="all web")]
