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


"""Request and response handling for the XML API

Every request is a single round trip.  The query is sent with pan-python,
and the response element is returned as an :class:`Envelope`.  A response
with a status other than success is returned, not raised, so the caller
decides how to report it.

"""

import re

import pan.xapi

import panconfig.errors as err
from panconfig import getlogger

logger = getlogger(__name__)

GET = "get"
POST = "post"

# Query parameters that are never logged
_SECRET_PARAMS = ("key", "password")

# HTTP statuses PAN-OS uses to reject a request, such as bad credentials
# or an invalid key.  They are reported with the same response code.
API_HTTP_CODES = ("400", "403")

_HTTP_ERROR = re.compile(r"^URLError: code: (\d+)(?: reason: (.*))?$")


class Envelope(object):
    """The response element of one API call

    Attributes:
        status (str): The ``status`` attribute, usually 'success' or 'error'
        code (str): The ``code`` attribute, if any
        message (str): The message returned by the device, if any
        result (Element): The ``result`` element, or None
        xml (str): The raw XML document

    """

    def __init__(self, status, code=None, message=None, result=None, xml=None):
        self.status = status
        self.code = code
        self.message = message
        self.result = result
        self.xml = xml

    @classmethod
    def from_xapi(cls, xapi):
        return cls(
            status=xapi.status,
            code=xapi.status_code,
            message=xapi.status_detail,
            result=xapi.element_result,
            xml=xapi.xml_document,
        )

    @property
    def ok(self):
        return self.status == "success"

    def raise_for_status(self, context=None, error_class=err.OperationError, pan_device=None):
        """Raise an exception if the status is not success

        Args:
            context (str): Short description of the request for the message
            error_class: Subclass of :class:`panconfig.errors.ProtocolError`
                to raise
            pan_device: Device the request was sent to

        """
        if self.ok:
            return
        raise error_class(self.code, self.message, context, pan_device=pan_device)

    def __repr__(self):
        return "<Envelope status=%r code=%r>" % (self.status, self.code)


def generate_xapi(hostname, api_key=None, api_username=None, api_password=None,
                  port=None, timeout=None, tag=None, use_get=False):
    """Return a new pan-python xapi object for one request"""
    try:
        return pan.xapi.PanXapi(
            tag=tag,
            api_username=api_username,
            api_password=api_password,
            api_key=api_key,
            hostname=hostname,
            port=port,
            timeout=timeout,
            use_get=use_get,
        )
    except pan.xapi.PanXapiError as e:
        raise err.ConfigError(str(e))


def classify_exception(e, xapi, pan_device=None):
    """Convert a pan-python exception to a panconfig exception

    Returns None when the device answered with a well formed response,
    because a response with an error status is not an exception at this
    layer.

    """
    if xapi.element_root is not None and xapi.status is not None:
        return None
    msg = str(e)
    if msg.startswith("URLError:"):
        if msg.endswith("timed out"):
            return err.ConnectionTimeout(msg, pan_device=pan_device)
        return err.TransportError(msg, pan_device=pan_device)
    elif msg.startswith("ElementTree.fromstring") or msg.startswith("no "):
        # ParseError, or missing response headers and attributes
        return err.ParseError(msg, pan_device=pan_device)
    return err.TransportError(msg, pan_device=pan_device)


def rejected_envelope(e):
    """Return an error Envelope for a request PAN-OS rejected over HTTP

    pan-python reports an HTTP 400 or 403 as a URLError, although the
    device did answer the request.  Returns None for any other exception.

    """
    match = _HTTP_ERROR.match(str(e))
    if match is None or match.group(1) not in API_HTTP_CODES:
        return None
    return Envelope("error", match.group(1), match.group(2))


def _loggable(params):
    return dict((k, "*****" if k in _SECRET_PARAMS else v) for k, v in params.items())


def call(xapi, method, *args, **kwargs):
    """Run one pan-python request method and return the response envelope

    A request rejected with HTTP 400 or 403 returns an error envelope
    with that code.

    Raises:
        TransportError: The device could not be reached
        ParseError: The response could not be parsed

    """
    pan_device = kwargs.pop("pan_device", None)
    try:
        getattr(xapi, method)(*args, **kwargs)
    except pan.xapi.PanXapiError as e:
        envelope = rejected_envelope(e)
        if envelope is not None:
            logger.debug2("Request rejected: %s", e)
            return envelope
        the_exception = classify_exception(e, xapi, pan_device)
        if the_exception is not None:
            raise the_exception
    except OSError as e:
        # socket timeouts and resets while reading the response
        if "timed out" in str(e):
            raise err.ConnectionTimeout(str(e), pan_device=pan_device)
        raise err.TransportError(str(e), pan_device=pan_device)
    envelope = Envelope.from_xapi(xapi)
    logger.debug2("Response status=%s code=%s", envelope.status, envelope.code)
    return envelope


def keygen(hostname, api_username, api_password, port=None, timeout=None, tag=None):
    """Request an API key

    Returns:
        str: The API key

    Raises:
        AuthError: The device rejected the credentials

    """
    logger.debug("Getting API Key from %s for user %s" % (hostname, api_username))
    xapi = generate_xapi(
        hostname,
        api_username=api_username,
        api_password=api_password,
        port=port,
        timeout=timeout,
        tag=tag,
    )
    envelope = call(xapi, "keygen")
    envelope.raise_for_status("keygen", error_class=err.AuthError)
    if not xapi.api_key:
        raise err.ParseError("keygen(): key element not found")
    return xapi.api_key


def execute(device, verb, params):
    """Send one request to the device

    The API key of the device is added to the query.

    Args:
        device (PanDevice): The device to send the request to
        verb (str): 'get' or 'post'
        params (dict): Query parameters such as type, action, xpath,
            element, or cmd

    Returns:
        Envelope: The response, which may have an error status

    """
    if verb not in (GET, POST):
        raise err.ConfigError("Unknown HTTP verb: %s" % (verb,))
    query = dict(params)
    query["key"] = device.api_key
    logger.debug1("%s %s: %s" % (verb.upper(), device.hostname, _loggable(query)))
    xapi = device.generate_xapi(use_get=(verb == GET))
    return call(xapi, "ad_hoc", qs=query, modify_qs=False, pan_device=device)
