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


"""
Resolve the XPath of a configuration node.

Example:

    >>> from panconfig import xpaths
    >>> xpaths.resolve(xpaths.STANDALONE, xpaths.ADDRESS, name="srv1")
    "/config/devices/entry[@name='localhost.localdomain']/vsys/entry[@name='vsys1']/address/entry[@name='srv1']"
    >>> xpaths.resolve(xpaths.PANORAMA, xpaths.TAG, xpaths.Scope.shared())
    "/config/shared/tag"

"""

import panconfig.errors as err


# Device roles
STANDALONE = "standalone"
PANORAMA = "panorama"

# Object categories
ADDRESS = "address"
ADDRESS_GROUP = "address-group"
SERVICE = "service"
SERVICE_GROUP = "service-group"
TAG = "tag"
DEVICE = "device"
DEVICE_GROUP = "device-group"

OBJECT_CATEGORIES = (ADDRESS, ADDRESS_GROUP, SERVICE, SERVICE_GROUP, TAG)

DEFAULT_VSYS = "vsys1"

XPATH_DEVICE = "/config/devices/entry[@name='localhost.localdomain']"
XPATH_VSYS = XPATH_DEVICE + "/vsys/entry[@name='%(vsys)s']"
XPATH_DEVICE_GROUPS = XPATH_DEVICE + "/device-group"
XPATH_DEVICE_GROUP = XPATH_DEVICE_GROUPS + "/entry[@name='%(devicegroup)s']"
XPATH_SHARED = "/config/shared"
XPATH_MGTCONFIG_DEVICES = "/config/mgt-config/devices"
XPATH_DEVICECONFIG_SYSTEM = XPATH_DEVICE + "/deviceconfig/system"
XPATH_PANORAMA = "/config/panorama"
XPATH_ALL_DEVICES = "/config/devices/entry"


def entry(name):
    return "entry[@name='%s']" % (name,)


class Scope(object):
    """Where an object lives on the device

    Either shared (Panorama only) or device specific.  A device specific
    scope on Panorama names the device-group that holds the object.

    Use :meth:`Scope.shared` and :meth:`Scope.device` instead of the
    constructor.

    """

    def __init__(self, shared=False, devicegroup=None):
        if shared and devicegroup is not None:
            raise err.ConfigError(
                "An object cannot be both shared and in device-group '%s'" % devicegroup)
        self.is_shared = shared
        self.devicegroup = devicegroup

    @classmethod
    def shared(cls):
        return cls(shared=True)

    @classmethod
    def device(cls, devicegroup=None):
        return cls(devicegroup=devicegroup or None)

    @classmethod
    def of(cls, devicegroup=None, shared=False):
        """Build a scope from the keyword arguments of the public methods"""
        if shared:
            return cls(shared=True, devicegroup=devicegroup or None)
        return cls.device(devicegroup)

    def __eq__(self, other):
        return (isinstance(other, Scope)
                and self.is_shared == other.is_shared
                and self.devicegroup == other.devicegroup)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __repr__(self):
        if self.is_shared:
            return "Scope.shared()"
        return "Scope.device(%r)" % (self.devicegroup,)


def _vsys_root(scope, vsys):
    if scope.is_shared:
        raise err.ConfigError(
            "Shared objects can only be used when connected to a Panorama device")
    return XPATH_VSYS % {"vsys": vsys or DEFAULT_VSYS}


def _panorama_object_root(scope, vsys):
    if scope.is_shared:
        return XPATH_SHARED
    if not scope.devicegroup:
        raise err.ConfigError("device-group required")
    return XPATH_DEVICE_GROUP % {"devicegroup": scope.devicegroup}


def _mgtconfig_root(scope, vsys):
    return XPATH_MGTCONFIG_DEVICES


def _device_groups_root(scope, vsys):
    return XPATH_DEVICE_GROUPS


# (role, category) -> function returning the container xpath, and whether
# the category name is appended to it
_TEMPLATES = {}
for _category in OBJECT_CATEGORIES:
    _TEMPLATES[(STANDALONE, _category)] = (_vsys_root, True)
    _TEMPLATES[(PANORAMA, _category)] = (_panorama_object_root, True)
_TEMPLATES[(PANORAMA, DEVICE)] = (_mgtconfig_root, False)
_TEMPLATES[(PANORAMA, DEVICE_GROUP)] = (_device_groups_root, False)
del _category


def _check_role_and_category(role, category):
    if role not in (STANDALONE, PANORAMA):
        raise err.ConfigError("Unknown device role: %s" % (role,))
    if category not in OBJECT_CATEGORIES + (DEVICE, DEVICE_GROUP):
        raise err.ConfigError("Unknown object category: %s" % (category,))
    if (role, category) not in _TEMPLATES:
        raise err.ConfigError(
            "%s objects can only be configured on a Panorama device" % (category,))


def resolve(role, category, scope=None, name=None, vsys=DEFAULT_VSYS):
    """Return the xpath of a configuration node

    Args:
        role (str): :data:`STANDALONE` or :data:`PANORAMA`
        category (str): One of the category constants in this module
        scope (Scope): Shared or device specific (Default: device specific
            with no device-group)
        name (str): Name of the entry.  If None, the xpath of the container
            holding every entry of the category is returned.
        vsys (str): Vsys of a standalone firewall

    Returns:
        str: The xpath

    Raises:
        ConfigError: The combination is ambiguous or not valid for the role,
            for example a Panorama object without a device-group

    """
    if scope is None:
        scope = Scope.device()
    _check_role_and_category(role, category)
    root_func, append_category = _TEMPLATES[(role, category)]
    xpath = root_func(scope, vsys)
    if append_category:
        xpath += "/" + category
    if name is not None:
        if not name:
            raise err.ConfigError("An empty %s name is not allowed" % (category,))
        xpath += "/" + entry(name)
    return xpath


def search_xpath(role, category, managed_by_panorama=False, scope=None, vsys=DEFAULT_VSYS):
    """Return the xpath used to list every entry of a category

    A firewall that is managed by Panorama lists the objects pushed from
    Panorama.  Panorama lists the objects of every device-group when no
    device-group and no shared scope is given.

    """
    if scope is None:
        scope = Scope.device()
    _check_role_and_category(role, category)
    if role == STANDALONE:
        if scope.devicegroup is not None:
            raise err.ConfigError(
                "You must be connected to a Panorama device when specifying a device-group")
        if managed_by_panorama and not scope.is_shared:
            return "%s//%s" % (XPATH_PANORAMA, category)
    elif category in OBJECT_CATEGORIES and not scope.is_shared and not scope.devicegroup:
        return "%s//%s" % (XPATH_ALL_DEVICES, category)
    elif category == DEVICE_GROUP:
        return "%s//%s" % (XPATH_ALL_DEVICES, category)
    return resolve(role, category, scope, vsys=vsys)
