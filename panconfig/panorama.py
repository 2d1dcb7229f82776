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


"""Panorama and its device-groups"""

import collections
import time
import xml.etree.ElementTree as ET

import panconfig.errors as err
from panconfig import getlogger, string_or_list, xpaths
from panconfig.base import PanDevice, _job_id
from panconfig.protocol import GET

logger = getlogger(__name__)

# Seconds to wait between registering a device and adding it to a
# device-group, so Panorama sees the new device
DEVICE_GROUP_SETTLE_DELAY = 0.2


class ManagedDevice(collections.namedtuple("ManagedDevice", ["serial"])):
    """A device managed by Panorama

    Args:
        serial (str): Serial number of the device

    """
    __slots__ = ()

    @classmethod
    def parse(cls, entry):
        return cls(entry.get("name"))

    def element(self):
        return ET.Element("entry", {"name": self.serial})

    def element_str(self):
        return ET.tostring(self.element(), encoding="unicode")


class DeviceGroup(collections.namedtuple(
        "DeviceGroup", ["name", "devices", "description"])):
    """A device-group in Panorama

    Args:
        name (str): Name of the device-group
        devices (list): Serial numbers of the devices in the device-group
        description (str): Description of the device-group

    """
    __slots__ = ()

    def __new__(cls, name, devices=None, description=None):
        return super(DeviceGroup, cls).__new__(
            cls, name, string_or_list(devices), description)

    @classmethod
    def parse(cls, entry):
        devices = [e.get("name") for e in entry.findall("./devices/entry")]
        return cls(entry.get("name"), devices, entry.findtext("description"))

    def element(self):
        root = ET.Element("entry", {"name": self.name})
        if self.devices:
            devices = ET.SubElement(root, "devices")
            for serial in self.devices:
                ET.SubElement(devices, "entry", {"name": serial})
        if self.description:
            ET.SubElement(root, "description").text = self.description
        return root

    def element_str(self):
        return ET.tostring(self.element(), encoding="unicode")


class Panorama(PanDevice):
    """Panorama device

    This class is used to access the XML API of a Panorama and configure
    its managed devices and device-groups.  Objects are configured in a
    device-group, or in the shared scope.

    Args:
        hostname: Hostname or IP of device for API connections
        api_key: The API Key for connecting to the device's API
        **kwargs: Other connection and system information, see
            :class:`panconfig.base.PanDevice`

    """
    DEVICE_TYPE = xpaths.PANORAMA

    def devices(self):
        """Return the devices managed by this Panorama

        Returns:
            list: :class:`ManagedDevice` instances

        """
        envelope = self.config("get", self.search_xpath(xpaths.DEVICE))
        return [ManagedDevice.parse(e) for e in _entries(envelope, "devices")]

    def device_groups(self):
        """Return every device-group and the devices linked to it

        Returns:
            list: :class:`DeviceGroup` instances

        """
        envelope = self.config("get", self.search_xpath(xpaths.DEVICE_GROUP))
        return [DeviceGroup.parse(e) for e in _entries(envelope, "device-group")]

    def create_device_group(self, name, description=None, devices=None):
        """Create a device-group

        Args:
            name (str): Name of the device-group
            description (str): Description of the device-group
            devices (list): Serial numbers of devices to add to it.  A
                comma separated string is also accepted.

        """
        if not name:
            raise err.ConfigError("A device-group name is required")
        dg = DeviceGroup(name, devices, description)
        self._logger.debug("Creating device-group %s on %s" % (name, self.id))
        self.config("set", self.xpath(xpaths.DEVICE_GROUP), dg.element_str())

    def delete_device_group(self, name):
        """Delete a device-group"""
        self.config("delete", self.xpath(xpaths.DEVICE_GROUP, name=name))

    def add_device(self, serial, devicegroup=None):
        """Add a device to Panorama

        If a device-group is given, the device is also added to it.  The
        two changes are separate requests, with a short fixed wait in
        between.

        Args:
            serial (str): Serial number of the device
            devicegroup (str): Name of the device-group to add the device to

        """
        if not serial:
            raise err.ConfigError("A device serial number is required")
        dg_xpath = None
        if devicegroup is not None:
            dg_xpath = self.xpath(xpaths.DEVICE_GROUP, name=devicegroup)

        device = ManagedDevice(serial)
        self._logger.debug("Adding device %s to %s" % (serial, self.id))
        self.config("set", self.xpath(xpaths.DEVICE), device.element_str())
        if dg_xpath is None:
            return

        time.sleep(DEVICE_GROUP_SETTLE_DELAY)

        devices = ET.Element("devices")
        devices.append(device.element())
        self._logger.debug("Adding device %s to device-group %s" % (serial, devicegroup))
        self.config("set", dg_xpath, ET.tostring(devices, encoding="unicode"))

    def remove_device(self, serial, devicegroup=None):
        """Remove a device from Panorama

        Args:
            serial (str): Serial number of the device
            devicegroup (str): If given, the device is only removed from
                this device-group

        """
        if not serial:
            raise err.ConfigError("A device serial number is required")
        if devicegroup is None:
            xpath = self.xpath(xpaths.DEVICE, name=serial)
        else:
            xpath = "%s/devices/%s" % (
                self.xpath(xpaths.DEVICE_GROUP, name=devicegroup), xpaths.entry(serial))
        self.config("delete", xpath)

    def commit_all(self, devicegroup, devices=None):
        """Trigger a commit-all (commit to devices) on Panorama

        The commit is not waited on.

        Args:
            devicegroup (str): Push the configuration of this device-group
            devices (list): Limit commit-all to these serial numbers

        Returns:
            str: The commit job id, or None if no job was started

        """
        if not devicegroup:
            raise err.ConfigError("A device-group is required for commit-all")
        self._logger.debug("Commit-all initiated on device: %s" % (self.id,))

        serials = string_or_list(devices)
        e = ET.Element("commit-all")
        sp = ET.SubElement(e, "shared-policy")
        dg = ET.SubElement(sp, "device-group")
        if serials:
            ET.SubElement(dg, "name").text = devicegroup
            d = ET.SubElement(dg, "devices")
            for serial in serials:
                ET.SubElement(d, "entry", {"name": serial})
        else:
            ET.SubElement(dg, "entry", {"name": devicegroup})
        cmd = ET.tostring(e, encoding="unicode")

        envelope = self.execute(GET, {"type": "commit", "action": "all", "cmd": cmd})
        envelope.raise_for_status("commit-all", pan_device=self)
        return _job_id(envelope)


def _entries(envelope, tag):
    if envelope.result is None:
        return []
    return envelope.result.findall("./%s/entry" % (tag,))
