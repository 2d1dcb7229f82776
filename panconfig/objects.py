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


"""Objects module contains objects that exist in the 'Objects' tab in the firewall GUI"""

import collections
import xml.etree.ElementTree as ET

import panconfig.errors as err
from panconfig import getlogger, string_or_list, xpaths
from panconfig.xpaths import Scope

logger = getlogger(__name__)


# Address object types and the element holding the value of each
ADDRESS_TYPES = collections.OrderedDict([
    ("ip", "ip-netmask"),
    ("range", "ip-range"),
    ("fqdn", "fqdn"),
])

SERVICE_PROTOCOLS = ("tcp", "udp")

TAG_COLORS = collections.OrderedDict([
    ("Red", "color1"),
    ("Green", "color2"),
    ("Blue", "color3"),
    ("Yellow", "color4"),
    ("Copper", "color5"),
    ("Orange", "color6"),
    ("Purple", "color7"),
    ("Gray", "color8"),
    ("Light Green", "color9"),
    ("Cyan", "color10"),
    ("Light Gray", "color11"),
    ("Blue Gray", "color12"),
    ("Lime", "color13"),
    ("Black", "color14"),
    ("Gold", "color15"),
    ("Brown", "color16"),
])

_COLOR_NAMES = dict((code, name) for name, code in TAG_COLORS.items())
_COLOR_CODES = dict((name.lower(), code) for name, code in TAG_COLORS.items())

# Categories searched, in order, for the object a tag is applied to
TAG_SEARCH_ORDER = (
    xpaths.ADDRESS,
    xpaths.ADDRESS_GROUP,
    xpaths.SERVICE,
    xpaths.SERVICE_GROUP,
)


def color_code(name):
    """Returns the color code for a color

    Args:
        name (str): One of the following colors, in any case:

                * Red
                * Green
                * Blue
                * Yellow
                * Copper
                * Orange
                * Purple
                * Gray
                * Light Green
                * Cyan
                * Light Gray
                * Blue Gray
                * Lime
                * Black
                * Gold
                * Brown

    """
    if name in _COLOR_NAMES:
        return name
    try:
        return _COLOR_CODES[name.strip().lower()]
    except (KeyError, AttributeError):
        raise err.ConfigError("Color '{0}' is not valid".format(name))


def color_name(code):
    """Returns the color name of a color code, or the code if unknown"""
    return _COLOR_NAMES.get(code, code)


def _members(parent, path):
    return [m.text.strip() for m in parent.findall(path) if m.text and m.text.strip()]


def _children_str(entry):
    return "".join(ET.tostring(child, encoding="unicode") for child in entry)


class _Record(object):
    """Helpers shared by the object records

    ``element()`` returns the complete entry element.  ``element_str()``
    returns the element sent with a set request on the entry's xpath,
    which is every child of the entry.

    """
    __slots__ = ()

    def element_str(self):
        return _children_str(self.element())

    def _entry(self):
        return ET.Element("entry", {"name": self.name})


class Address(_Record, collections.namedtuple(
        "Address", ["name", "type", "value", "description"])):
    """Address Object

    Args:
        name (str): Name of the object
        type (str): Type of address: ip, range, or fqdn
        value (str): IP address, range, or FQDN
        description (str): Description of this object

    """
    __slots__ = ()

    def __new__(cls, name, type, value, description=None):
        return super(Address, cls).__new__(cls, name, type, value, description)

    @classmethod
    def parse(cls, entry):
        addr_type, value = None, None
        for t, tag in ADDRESS_TYPES.items():
            found = entry.find(tag)
            if found is not None:
                addr_type, value = t, (found.text or "").strip()
                break
        return cls(entry.get("name"), addr_type, value, entry.findtext("description"))

    def element(self):
        if self.type not in ADDRESS_TYPES:
            raise err.ConfigError(
                "Address type must be one of %s, not '%s'"
                % (", ".join(ADDRESS_TYPES), self.type))
        root = self._entry()
        ET.SubElement(root, ADDRESS_TYPES[self.type]).text = self.value
        if self.description:
            ET.SubElement(root, "description").text = self.description
        return root


class AddressGroup(_Record, collections.namedtuple(
        "AddressGroup", ["name", "type", "members", "filter", "description"])):
    """Address Group

    Args:
        name (str): Name of the address group
        type (str): static or dynamic
        members (list): Static address group members
        filter (str): Dynamic address group match criteria
        description (str): Description of this object

    """
    __slots__ = ()

    STATIC = "static"
    DYNAMIC = "dynamic"

    def __new__(cls, name, type, members=None, filter=None, description=None):
        return super(AddressGroup, cls).__new__(
            cls, name, type, string_or_list(members), filter, description)

    @classmethod
    def parse(cls, entry):
        members = _members(entry, "./static/member")
        dyn_filter = (entry.findtext("./dynamic/filter") or "").strip()
        if dyn_filter:
            return cls(entry.get("name"), cls.DYNAMIC, members, dyn_filter,
                       entry.findtext("description"))
        return cls(entry.get("name"), cls.STATIC, members, None,
                   entry.findtext("description"))

    def element(self):
        root = self._entry()
        if self.type == self.STATIC:
            if not self.members:
                raise err.ConfigError(
                    "You cannot create a static address group without any members")
            static = ET.SubElement(root, "static")
            for member in self.members:
                ET.SubElement(static, "member").text = member
        elif self.type == self.DYNAMIC:
            if not self.filter:
                raise err.ConfigError(
                    "You cannot create a dynamic address group without any filter")
            dynamic = ET.SubElement(root, "dynamic")
            ET.SubElement(dynamic, "filter").text = self.filter
        else:
            raise err.ConfigError(
                "Address group type must be static or dynamic, not '%s'" % (self.type,))
        if self.description:
            ET.SubElement(root, "description").text = self.description
        return root


class Service(_Record, collections.namedtuple(
        "Service", ["name", "protocol", "destination_port", "source_port", "description"])):
    """Service Object

    Args:
        name (str): Name of the object
        protocol (str): Protocol of the service, either tcp or udp
        destination_port (str): Destination port of the service
        source_port (str): Source port of the protocol, if any
        description (str): Description of this object

    """
    __slots__ = ()

    def __new__(cls, name, protocol, destination_port, source_port=None, description=None):
        return super(Service, cls).__new__(
            cls, name, protocol, destination_port, source_port, description)

    @classmethod
    def parse(cls, entry):
        protocol, port, source_port = None, None, None
        proto = entry.find("protocol")
        if proto is not None and len(proto):
            protocol = proto[0].tag
            port = proto[0].findtext("port")
            source_port = proto[0].findtext("source-port")
        return cls(entry.get("name"), protocol, port, source_port,
                   entry.findtext("description"))

    def element(self):
        if self.protocol not in SERVICE_PROTOCOLS:
            raise err.ConfigError(
                "Service protocol must be tcp or udp, not '%s'" % (self.protocol,))
        if not self.destination_port:
            raise err.ConfigError("A service requires a destination port")
        root = self._entry()
        proto = ET.SubElement(ET.SubElement(root, "protocol"), self.protocol)
        ET.SubElement(proto, "port").text = str(self.destination_port)
        if self.source_port:
            ET.SubElement(proto, "source-port").text = str(self.source_port)
        if self.description:
            ET.SubElement(root, "description").text = self.description
        return root


class ServiceGroup(_Record, collections.namedtuple("ServiceGroup", ["name", "members"])):
    """Service Group

    Args:
        name (str): Name of the service group
        members (list): Service objects or groups in this group

    """
    __slots__ = ()

    def __new__(cls, name, members=None):
        return super(ServiceGroup, cls).__new__(cls, name, string_or_list(members))

    @classmethod
    def parse(cls, entry):
        return cls(entry.get("name"), _members(entry, "./members/member"))

    def element(self):
        if not self.members:
            raise err.ConfigError(
                "You cannot create a service group without any members")
        root = self._entry()
        members = ET.SubElement(root, "members")
        for member in self.members:
            ET.SubElement(members, "member").text = member
        return root


class Tag(_Record, collections.namedtuple("Tag", ["name", "color", "comments"])):
    """Administrative tag

    Args:
        name (str): Name of the tag
        color (str): Color name (eg. 'Red', 'Light Green').  See
            :func:`color_code` for the list of colors.
        comments (str): Comments

    """
    __slots__ = ()

    def __new__(cls, name, color=None, comments=None):
        return super(Tag, cls).__new__(cls, name, color, comments)

    @classmethod
    def parse(cls, entry):
        code = entry.findtext("color")
        return cls(entry.get("name"), color_name(code) if code else None,
                   entry.findtext("comments"))

    def element(self):
        root = self._entry()
        if self.color:
            ET.SubElement(root, "color").text = color_code(self.color)
        if self.comments:
            ET.SubElement(root, "comments").text = self.comments
        return root


_RECORDS = {
    xpaths.ADDRESS: Address,
    xpaths.ADDRESS_GROUP: AddressGroup,
    xpaths.SERVICE: Service,
    xpaths.SERVICE_GROUP: ServiceGroup,
    xpaths.TAG: Tag,
}


class Objects(object):
    """Object configuration subsystem of a device

    A member of every base.PanDevice object.  Lists, creates, and deletes
    address objects, address groups, services, service groups, and tags.

    Every method accepts a ``devicegroup`` and a ``shared`` keyword.  When
    connected to Panorama a device-group is required, unless ``shared``
    is True.  A firewall has no device-groups and no shared objects.

    Args:
        device (base.PanDevice): The firewall or Panorama to configure

    """

    def __init__(self, device):
        # Create a class logger
        self._logger = getlogger(__name__ + "." + self.__class__.__name__)
        self.device = device

    # Listing

    def _list(self, category, devicegroup=None, shared=False):
        scope = Scope.of(devicegroup, shared)
        xpath = self.device.search_xpath(category, scope)
        envelope = self.device.config("get", xpath)
        if envelope.result is None:
            return []
        record = _RECORDS[category]
        return [record.parse(e) for e in envelope.result.findall("./%s/entry" % (category,))]

    def addresses(self, devicegroup=None, shared=False):
        """Return the address objects

        On Panorama, every device-group is searched when no device-group
        is given.

        Returns:
            list: :class:`Address` instances

        """
        return self._list(xpaths.ADDRESS, devicegroup, shared)

    def address_groups(self, devicegroup=None, shared=False):
        """Return the address groups

        Returns:
            list: :class:`AddressGroup` instances

        """
        return self._list(xpaths.ADDRESS_GROUP, devicegroup, shared)

    def services(self, devicegroup=None, shared=False):
        return self._list(xpaths.SERVICE, devicegroup, shared)

    def service_groups(self, devicegroup=None, shared=False):
        return self._list(xpaths.SERVICE_GROUP, devicegroup, shared)

    def tags(self, devicegroup=None, shared=False):
        """Return the tags

        Returns:
            list: :class:`Tag` instances

        """
        return self._list(xpaths.TAG, devicegroup, shared)

    # Changes

    def _set(self, category, obj, devicegroup=None, shared=False):
        if not obj.name:
            raise err.ConfigError("A %s name is required" % (category,))
        xpath = self.device.xpath(category, Scope.of(devicegroup, shared), obj.name)
        element = obj.element_str()
        self._logger.debug("Setting %s %s on %s" % (category, obj.name, self.device.id))
        self.device.config("set", xpath, element)

    def _delete(self, category, name, devicegroup=None, shared=False):
        if not name:
            raise err.ConfigError("A %s name is required" % (category,))
        xpath = self.device.xpath(category, Scope.of(devicegroup, shared), name)
        self._logger.debug("Deleting %s %s on %s" % (category, name, self.device.id))
        self.device.config("delete", xpath)

    def create_address(self, name, type, value, description=None,
                       devicegroup=None, shared=False):
        """Create an address object

        Args:
            name (str): Name of the object
            type (str): ip, range, or fqdn
            value (str): IP address with optional netmask, IP range, or FQDN
            description (str): Description of this object
            devicegroup (str): Device-group on Panorama
            shared (bool): Create a shared object on Panorama

        """
        self._set(xpaths.ADDRESS, Address(name, type, value, description),
                  devicegroup, shared)

    def create_static_group(self, name, members, description=None,
                            devicegroup=None, shared=False):
        """Create a static address group

        Args:
            name (str): Name of the address group
            members: List of members, or a comma separated string like
                "web-server1, web-server2"
            description (str): Description of this object
            devicegroup (str): Device-group on Panorama
            shared (bool): Create a shared object on Panorama

        """
        group = AddressGroup(name, AddressGroup.STATIC, members, description=description)
        self._set(xpaths.ADDRESS_GROUP, group, devicegroup, shared)

    def create_dynamic_group(self, name, criteria, description=None,
                             devicegroup=None, shared=False):
        """Create a dynamic address group

        The criteria use the tags as the match criteria, for example
        ``'vm-servers' and 'some tag' or 'pcs'``.

        """
        group = AddressGroup(name, AddressGroup.DYNAMIC, filter=criteria,
                             description=description)
        self._set(xpaths.ADDRESS_GROUP, group, devicegroup, shared)

    def create_service(self, name, protocol, destination_port, source_port=None,
                       description=None, devicegroup=None, shared=False):
        self._set(xpaths.SERVICE,
                  Service(name, protocol, destination_port, source_port, description),
                  devicegroup, shared)

    def create_service_group(self, name, members, devicegroup=None, shared=False):
        self._set(xpaths.SERVICE_GROUP, ServiceGroup(name, members), devicegroup, shared)

    def create_tag(self, name, color=None, comments=None, devicegroup=None, shared=False):
        """Create a tag

        Args:
            name (str): Name of the tag
            color (str): Color name, see :func:`color_code`
            comments (str): Comments
            devicegroup (str): Device-group on Panorama
            shared (bool): Create a shared tag on Panorama

        """
        self._set(xpaths.TAG, Tag(name, color, comments), devicegroup, shared)

    def delete_address(self, name, devicegroup=None, shared=False):
        self._delete(xpaths.ADDRESS, name, devicegroup, shared)

    def delete_address_group(self, name, devicegroup=None, shared=False):
        self._delete(xpaths.ADDRESS_GROUP, name, devicegroup, shared)

    def delete_service(self, name, devicegroup=None, shared=False):
        self._delete(xpaths.SERVICE, name, devicegroup, shared)

    def delete_service_group(self, name, devicegroup=None, shared=False):
        self._delete(xpaths.SERVICE_GROUP, name, devicegroup, shared)

    def delete_tag(self, name, devicegroup=None, shared=False):
        self._delete(xpaths.TAG, name, devicegroup, shared)

    # Tagging

    def find_category(self, name, devicegroup=None, shared=False):
        """Return the category of the object with this name

        Address objects, address groups, services, and service groups are
        searched in that order.  If the name exists in more than one
        category, the first category wins.

        Returns:
            str: The category, or None if no object has this name

        """
        for category in TAG_SEARCH_ORDER:
            for obj in self._list(category, devicegroup, shared):
                if obj.name == name:
                    return category
        return None

    def _tagged_xpath(self, name, devicegroup, shared):
        if not name:
            raise err.ConfigError("An object name is required")
        scope = Scope.of(devicegroup, shared)
        # Fail on a missing device-group before anything is sent
        self.device.xpath(xpaths.ADDRESS, scope)
        category = self.find_category(name, devicegroup, shared)
        if category is None:
            raise err.ObjectNotFound(
                "No address, address group, service, or service group named '%s'" % (name,),
                pan_device=self.device)
        return self.device.xpath(category, scope, name) + "/tag"

    def apply_tag(self, tag, object_name, devicegroup=None, shared=False):
        """Apply tags to an address or service object

        The tags replace any tags already on the object.

        Args:
            tag: Tag name, list of tag names, or a comma separated string
                like "servers, vm"
            object_name (str): Name of the address object, address group,
                service, or service group
            devicegroup (str): Device-group on Panorama
            shared (bool): The object is shared on Panorama

        Raises:
            ObjectNotFound: No object has this name

        """
        tags = string_or_list(tag)
        if not tags:
            raise err.ConfigError("At least one tag is required")
        xpath = self._tagged_xpath(object_name, devicegroup, shared)
        element = ET.Element("tag")
        for t in tags:
            ET.SubElement(element, "member").text = t
        self.device.config("edit", xpath, ET.tostring(element, encoding="unicode"))

    def remove_tag(self, tag, object_name, devicegroup=None, shared=False):
        """Remove a single tag from an address or service object

        Raises:
            ObjectNotFound: No object has this name

        """
        if not tag:
            raise err.ConfigError("A tag is required")
        xpath = self._tagged_xpath(object_name, devicegroup, shared)
        self.device.config("delete", "%s/member[text()='%s']" % (xpath, tag))
