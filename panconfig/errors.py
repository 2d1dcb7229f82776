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


"""Exception classes used by panconfig package"""

from pan.xapi import PanXapiError


# Messages for the status codes returned in the response element
ERROR_CODES = {
    "400": "Bad request - Returned when a required parameter is missing, an illegal parameter value is used",
    "403": "Forbidden - Returned for authentication or authorization errors including invalid key, insufficient admin access rights",
    "1": "Unknown command - The specific config or operational command is not recognized",
    "2": "Internal error - Check with technical support when seeing these errors",
    "3": "Internal error - Check with technical support when seeing these errors",
    "4": "Internal error - Check with technical support when seeing these errors",
    "5": "Internal error - Check with technical support when seeing these errors",
    "6": "Bad Xpath - The xpath specified in one or more attributes of the command is invalid. Check the API browser for proper xpath values",
    "7": "Object not present - Object specified by the xpath is not present. For example, entry[@name='value'] where no object with name 'value' is present",
    "8": "Object not unique - For commands that operate on a single object, the specified object is not unique",
    "9": "Internal error - Check with technical support when seeing these errors",
    "10": "Reference count not zero - Object cannot be deleted as there are other objects that refer to it. For example, address object still in use in policy",
    "11": "Internal error - Check with technical support when seeing these errors",
    "12": "Invalid object - Xpath or element values provided are not complete",
    "13": "Operation failed - A descriptive error message is returned in the response",
    "14": "Operation not possible - Operation is not possible. For example, moving a rule up one position when it is already at the top",
    "15": "Operation denied - For example, Admin not allowed to delete own account, Running a command that is not allowed on a passive device",
    "16": "Unauthorized - The API role does not have access rights to run this query",
    "17": "Invalid command - Invalid command or parameters",
    "18": "Malformed command - The XML is malformed",
    "19": "Success - Command completed successfully",
    "20": "Success - Command completed successfully",
    "21": "Internal error - Check with technical support when seeing these errors",
    "22": "Session timed out - The session for this query timed out",
}

UNKNOWN_ERROR_CODE = "Unknown error code"


def error_message(code):
    """Return the human readable message for a response status code"""
    return ERROR_CODES.get(str(code) if code is not None else None, UNKNOWN_ERROR_CODE)


class PanConfigError(PanXapiError):
    """Exception for errors in the panconfig package

    Attributes:
        message: The error message for the exception
        pan_device: A reference to the PanDevice that generated the exception
    """
    def __init__(self, *args, **kwargs):
        self.pan_device = kwargs.pop('pan_device', None)
        super(PanConfigError, self).__init__(*args, **kwargs)


class TransportError(PanConfigError):
    """The device could not be reached or the HTTP exchange failed"""
    pass


class ConnectionTimeout(TransportError):
    pass


class ParseError(PanConfigError):
    """The response was not a well-formed XML API response"""
    pass


class ConfigError(PanConfigError):
    """A role or scope precondition was violated

    Always raised before any request is sent to the device.
    """
    pass


class ObjectNotFound(PanConfigError):
    pass


class ProtocolError(PanConfigError):
    """The device answered with a response status other than success

    Attributes:
        code (str): The ``code`` attribute of the response element
        detail (str): The message returned by the device, if any
        message (str): The complete error message
    """
    def __init__(self, code=None, detail=None, context=None, **kwargs):
        self.code = code
        self.detail = detail
        self.context = context
        msg = "error code %s: %s" % (code, error_message(code))
        if context:
            msg += " (%s)" % context
        if detail:
            msg += ": %s" % detail
        self.message = msg
        super(ProtocolError, self).__init__(msg, **kwargs)


class AuthError(ProtocolError):
    """The keygen request was rejected"""
    pass


class OperationError(ProtocolError):
    """A config, op, or commit request was rejected"""
    pass
