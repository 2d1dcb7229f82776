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

import collections
import xml.etree.ElementTree as ET

try:
    from unittest import mock
except ImportError:
    import mock

import pan.xapi
import pytest

from panconfig.firewall import Firewall
from panconfig.panorama import Panorama


Request = collections.namedtuple("Request", ["query", "use_get", "kwargs"])


class FakeXapi(object):
    """Replays the next canned response of a FakeDevice

    Sets the same attributes as pan.xapi.PanXapi, and raises
    PanXapiError in the same cases.
    """

    def __init__(self, device, **kwargs):
        self.device = device
        self.kwargs = kwargs
        self.api_username = kwargs.get("api_username")
        self.api_password = kwargs.get("api_password")
        self.api_key = kwargs.get("api_key")
        self._clear()

    def _clear(self):
        self.status = None
        self.status_code = None
        self.status_detail = None
        self.element_root = None
        self.element_result = None
        self.xml_document = None

    def _respond(self, query):
        self._clear()
        self.device.requests.append(
            Request(query, self.kwargs.get("use_get", False), self.kwargs))
        response = self.device.responses.pop(0)
        if isinstance(response, Exception):
            raise response

        self.xml_document = response
        try:
            root = ET.fromstring(response)
        except ET.ParseError as msg:
            self.status_detail = "ElementTree.fromstring ParseError: %s" % msg
            raise pan.xapi.PanXapiError(self.status_detail)
        self.element_root = root
        self.element_result = root.find("result")
        self.status = root.get("status")
        self.status_code = root.get("code")
        self.status_detail = root.findtext("./msg/line") or root.findtext("./msg")
        if self.status != "success":
            raise pan.xapi.PanXapiError(self.status_detail)

    def keygen(self):
        self._respond({
            "type": "keygen",
            "user": self.api_username,
            "password": self.api_password,
        })
        key = self.element_result.find("key") if self.element_result is not None else None
        if key is None:
            raise pan.xapi.PanXapiError("keygen(): key element not found")
        self.api_key = key.text

    def ad_hoc(self, qs=None, xpath=None, modify_qs=False):
        self._respond(dict(qs or {}))


class FakeDevice(object):
    """Stands in for the pan.xapi.PanXapi class

    Queue responses with the respond methods, then inspect ``requests``.
    """

    def __init__(self):
        self.responses = []
        self.requests = []

    def __call__(self, **kwargs):
        return FakeXapi(self, **kwargs)

    def respond(self, *responses):
        self.responses.extend(responses)

    def respond_success(self, result=""):
        self.respond('<response status="success"><result>%s</result></response>' % result)

    def respond_error(self, code, msg=""):
        self.respond(
            '<response status="error" code="%s"><msg><line>%s</line></msg></response>'
            % (code, msg))

    @property
    def queries(self):
        return [r.query for r in self.requests]

    @property
    def last(self):
        return self.requests[-1].query


@pytest.fixture
def device():
    fake = FakeDevice()
    with mock.patch("pan.xapi.PanXapi", fake):
        yield fake


@pytest.fixture
def fw(device):
    return Firewall("fw.example.com", "secret", serial="007951000012345")


@pytest.fixture
def managed_fw(device):
    return Firewall("fw.example.com", "secret", managed_by_panorama=True)


@pytest.fixture
def pano(device):
    return Panorama("pano.example.com", "secret", platform="m")
