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


"""Device connection handling and the connect handshake"""

import re

import panconfig.errors as err
from panconfig import getlogger, protocol, xpaths
from panconfig.protocol import GET, POST

logger = getlogger(__name__)

CMD_SHOW_SYSTEM_INFO = "<show><system><info></info></system></show>"
CMD_SHOW_PANORAMA_STATUS = "<show><panorama-status></panorama-status></show>"

# Marker in the panorama-status output of a firewall connected to Panorama
PANORAMA_CONNECTED_MARKER = ": yes"

# Platform family reported by Panorama (M-series and virtual)
PANORAMA_PLATFORM_FAMILY = "m"


class PanDevice(object):
    """A Palo Alto Networks device

    The device can be a firewall or Panorama.  The class holds the
    connection to the device and handles common device functions that
    apply to all device types.

    Usually this class is not instantiated directly. Use :func:`connect`
    to log in and get a :class:`panconfig.firewall.Firewall` or
    :class:`panconfig.panorama.Panorama` object.

    The object is immutable once created.  It can be shared by callers
    issuing independent requests, as every request builds its own
    connection.

    Args:
        hostname: Hostname or IP of device for API connections
        api_key: The API Key for connecting to the device's API
        port: Port of device for API connections
        timeout: Timeout in seconds for each API request
        tag: Tag of a .panrc entry holding connection settings
        platform: Platform family (eg. 'vm', 'm', '3200')
        model: Model of the device
        serial: The serial number of the device
        version: The PAN-OS version of the device
        managed_by_panorama (bool): The device is connected to a Panorama

    Attributes:
        objects (panconfig.objects.Objects): Object configuration subsystem

    """

    NAME = "hostname"
    DEVICE_TYPE = None

    def __init__(
        self,
        hostname,
        api_key,
        port=443,
        timeout=None,
        tag=None,
        platform=None,
        model=None,
        serial=None,
        version=None,
        managed_by_panorama=False,
        vsys=None,
    ):
        # create a class logger
        self._logger = getlogger(__name__ + "." + self.__class__.__name__)

        self.hostname = hostname
        self.api_key = api_key
        self.port = port
        self.timeout = timeout
        self.tag = tag
        self.platform = platform
        self.model = model
        self.serial = serial
        self.version = version
        self.version_info = parse_version(version)
        self.managed_by_panorama = managed_by_panorama
        self.vsys = vsys

        # avoid a premature import
        from panconfig import objects

        self.objects = objects.Objects(self)
        """Object configuration subsystem

        See Also: :class:`panconfig.objects.Objects`

        """

        self._frozen = True

    def __setattr__(self, name, value):
        if getattr(self, "_frozen", False):
            raise AttributeError(
                "can't set attribute '%s': %s objects are immutable"
                % (name, self.__class__.__name__))
        super(PanDevice, self).__setattr__(name, value)

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, self.id)

    @classmethod
    def create_from_device(cls, hostname, api_username, api_password, **kwargs):
        """Factory method, same as :func:`connect`"""
        return connect(hostname, api_username, api_password, **kwargs)

    # Properties

    @property
    def id(self):
        return str(getattr(self, self.NAME, None) or "<no-id>")

    @property
    def device_type(self):
        return self.DEVICE_TYPE

    @property
    def uri(self):
        if self.port is None or int(self.port) == 443:
            return "https://%s/api/?" % (self.hostname,)
        return "https://%s:%s/api/?" % (self.hostname, self.port)

    def generate_xapi(self, use_get=False):
        return protocol.generate_xapi(
            self.hostname,
            api_key=self.api_key,
            port=self.port,
            timeout=self.timeout,
            tag=self.tag,
            use_get=use_get,
        )

    # XPaths

    def xpath(self, category, scope=None, name=None):
        """Return the xpath of a configuration node on this device

        See Also: :func:`panconfig.xpaths.resolve`

        """
        return xpaths.resolve(self.device_type, category, scope, name, vsys=self.vsys)

    def search_xpath(self, category, scope=None):
        return xpaths.search_xpath(
            self.device_type, category, self.managed_by_panorama, scope, vsys=self.vsys)

    # Requests

    def execute(self, verb, params):
        """Send one request to this device

        See Also: :func:`panconfig.protocol.execute`

        """
        return protocol.execute(self, verb, params)

    def config(self, action, xpath, element=None):
        """Perform a configuration request and check the response

        Reads (get, show) are sent with HTTP GET, changes with HTTP POST.

        Args:
            action (str): get, show, set, edit, or delete
            xpath (str): The xpath of the configuration node
            element (str): The XML element for set and edit

        Returns:
            Envelope: The successful response

        Raises:
            OperationError: The device returned an error status

        """
        verb = GET if action in ("get", "show") else POST
        params = {"type": "config", "action": action, "xpath": xpath}
        if element is not None:
            params["element"] = element
        envelope = self.execute(verb, params)
        envelope.raise_for_status(
            "%s %s" % (action, xpath), pan_device=self)
        return envelope

    def op(self, cmd, error_class=err.OperationError):
        """Perform an operational command and check the response

        Args:
            cmd (str): The command in XML format

        Returns:
            Envelope: The successful response

        """
        envelope = self.execute(GET, {"type": "op", "cmd": cmd})
        envelope.raise_for_status(cmd, error_class=error_class, pan_device=self)
        return envelope

    def show_system_info(self):
        """Return the system information of the device

        Returns:
            dict: Text of every element under ``result/system``, such as
            'platform-family', 'model', 'serial', and 'sw-version'

        Raises:
            ProtocolError: The device returned an error status

        """
        envelope = self.op(CMD_SHOW_SYSTEM_INFO, error_class=err.ProtocolError)
        system = None
        if envelope.result is not None:
            system = envelope.result.find("system")
        if system is None:
            raise err.ParseError(
                "show system info: system element not found", pan_device=self)
        return dict((e.tag, (e.text or "").strip()) for e in system)

    def show_panorama_status(self):
        """Return True if the device is connected to a Panorama

        A response with an error status, or without the connected
        marker, means the device is not managed by Panorama.

        """
        envelope = self.execute(GET, {"type": "op", "cmd": CMD_SHOW_PANORAMA_STATUS})
        if not envelope.ok or envelope.result is None:
            self._logger.debug(
                "Panorama status unavailable on %s: %s" % (self.id, envelope.code))
            return False
        text = "".join(envelope.result.itertext())
        return PANORAMA_CONNECTED_MARKER in text

    def commit(self):
        """Trigger a commit

        When issued against Panorama, the configuration is only committed
        to Panorama itself, not to any device-group.  The commit is not
        waited on.

        Returns:
            str: The commit job id, or None if the device did not start a
            job (eg. there was nothing to commit)

        """
        self._logger.debug("Commit initiated on device: %s" % (self.id,))
        envelope = self.execute(GET, {"type": "commit", "cmd": "<commit></commit>"})
        envelope.raise_for_status("commit", pan_device=self)
        return _job_id(envelope)


def _job_id(envelope):
    if envelope.result is None:
        return None
    job = envelope.result.find("job")
    if job is None or not job.text:
        return None
    return job.text.strip()


def parse_version(version):
    """Return the (major, minor, patch) tuple of a PAN-OS version

    Example PAN-OS versions:  9.0.3-h1, 9.0.3.xfr, 10.1.0

    Returns None if the version can not be parsed.

    """
    if not version:
        return None
    match = re.search(r"(\d+)\.(\d+)\.(\d+)", version)
    if match is None:
        return None
    return tuple(int(x) for x in match.groups())


def connect(hostname, api_username, api_password, port=443, timeout=None,
            tag=None, vsys=xpaths.DEFAULT_VSYS):
    """Log in to a device and detect its type

    Retrieves an API key, the system information, and the Panorama
    connection status, then creates a
    :class:`panconfig.firewall.Firewall` or
    :class:`panconfig.panorama.Panorama`.

    Args:
        hostname: Hostname or IP of device for API connections
        api_username: Username of administrator to access API
        api_password: Password of administrator to access API
        port: Port of device for API connections
        timeout: Timeout in seconds for each API request
        tag: Tag of a .panrc entry holding connection settings
        vsys: The vsys to configure on a firewall

    Returns:
        PanDevice: New subclass instance (Firewall or Panorama instance)

    Raises:
        AuthError: The credentials were rejected
        ProtocolError: The system information could not be retrieved
        TransportError: The device could not be reached
        ParseError: A response could not be parsed

    """
    from panconfig import firewall, panorama

    api_key = protocol.keygen(
        hostname, api_username, api_password, port=port, timeout=timeout, tag=tag)

    # Create generic PanDevice to get information
    device = PanDevice(hostname, api_key, port=port, timeout=timeout, tag=tag)
    system_info = device.show_system_info()
    managed = device.show_panorama_status()

    kwargs = dict(
        port=port,
        timeout=timeout,
        tag=tag,
        platform=system_info.get("platform-family"),
        model=system_info.get("model"),
        serial=system_info.get("serial"),
        version=system_info.get("sw-version"),
        managed_by_panorama=managed,
    )
    if kwargs["platform"] == PANORAMA_PLATFORM_FAMILY:
        instance = panorama.Panorama(hostname, api_key, **kwargs)
    else:
        instance = firewall.Firewall(hostname, api_key, vsys=vsys, **kwargs)
    logger.debug("Connected to %s %s (model %s, serial %s, version %s)" % (
        instance.device_type, hostname, instance.model, instance.serial, instance.version))
    return instance
