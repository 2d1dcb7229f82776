#!/usr/bin/env python

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


"""Palo Alto Networks Firewall object"""

import xml.etree.ElementTree as ET

import panconfig.errors as err
from panconfig import getlogger, xpaths
from panconfig.base import PanDevice

logger = getlogger(__name__)


class Firewall(PanDevice):
    """A Palo Alto Networks Firewall

    A standalone firewall, which may itself be managed by a Panorama.
    Objects are configured in a single vsys.

    Args:
        hostname: Hostname or IP of device for API connections
        api_key: The API Key for connecting to the device's API
        vsys: The vsys of this firewall (eg. "vsys1", "vsys2", etc.)
        **kwargs: Other connection and system information, see
            :class:`panconfig.base.PanDevice`

    """
    DEVICE_TYPE = xpaths.STANDALONE
    DEFAULT_VSYS = xpaths.DEFAULT_VSYS

    def __init__(self, hostname, api_key, vsys=DEFAULT_VSYS, **kwargs):
        super(Firewall, self).__init__(
            hostname, api_key, vsys=vsys or self.DEFAULT_VSYS, **kwargs)

    def set_panorama_server(self, ip):
        """Configure the Panorama server that manages this firewall

        Args:
            ip (str): IP address or hostname of the Panorama

        """
        if not ip:
            raise err.ConfigError("A Panorama server address is required")
        element = ET.Element("panorama-server")
        element.text = ip
        self._logger.debug("Setting Panorama server of %s to %s" % (self.id, ip))
        self.config("set", xpaths.XPATH_DEVICECONFIG_SYSTEM,
                    ET.tostring(element, encoding="unicode"))
