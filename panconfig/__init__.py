# -*- coding: utf-8 -*-

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


"""panconfig is a library for configuring Palo Alto Networks firewalls and
Panorama through the XML API

Typical use::

    >>> from panconfig import connect
    >>> fw = connect("10.0.0.1", "admin", "password")
    >>> fw.objects.create_address("srv1", "ip", "10.0.0.5/32")
    >>> fw.commit()

"""

__author__ = 'Palo Alto Networks'
__email__ = 'techpartners@paloaltonetworks.com'
__version__ = '0.1.0'


import logging
import types

try:
    import pan
except ImportError as e:
    message = str(e) + ", please install the pan-python library (pip install pan-python)"
    raise ImportError(message)


def getlogger(name=__name__):
    logger_instance = logging.getLogger(name)
    if not any(isinstance(h, logging.NullHandler) for h in logger_instance.handlers):
        logger_instance.addHandler(logging.NullHandler())
    # Add convenience methods for logging
    logger_instance.debug1 = types.MethodType(
        lambda inst, msg, *args, **kwargs: inst.log(DEBUG1, msg, *args, **kwargs), logger_instance)
    logger_instance.debug2 = types.MethodType(
        lambda inst, msg, *args, **kwargs: inst.log(DEBUG2, msg, *args, **kwargs), logger_instance)
    logger_instance.debug3 = types.MethodType(
        lambda inst, msg, *args, **kwargs: inst.log(DEBUG3, msg, *args, **kwargs), logger_instance)
    logger_instance.debug4 = types.MethodType(
        lambda inst, msg, *args, **kwargs: inst.log(DEBUG4, msg, *args, **kwargs), logger_instance)
    return logger_instance


def isstring(arg):
    return isinstance(arg, str) or isinstance(arg, bytes)


# Create more debug logging levels
DEBUG1 = logging.DEBUG - 1
DEBUG2 = DEBUG1 - 1
DEBUG3 = DEBUG2 - 1
DEBUG4 = DEBUG3 - 1

logging.addLevelName(DEBUG1, 'DEBUG1')
logging.addLevelName(DEBUG2, 'DEBUG2')
logging.addLevelName(DEBUG3, 'DEBUG3')
logging.addLevelName(DEBUG4, 'DEBUG4')

# Adjust pan-python logging levels so they don't interfere with panconfig logging
pan.DEBUG1 = logging.DEBUG - 2  # equivalent to DEBUG2
pan.DEBUG2 = pan.DEBUG1 - 1
pan.DEBUG3 = pan.DEBUG2 - 1


logger = getlogger(__name__)


# Convenience methods used internally by module
# Do not use these methods outside the module


def string_or_list(value):
    """Return a list containing value

    This method allows flexibility in method arguments, allowing you to
    pass a list, a tuple, or a comma separated string.  Every item is
    stripped of surrounding whitespace and empty items are dropped.

    Args:
        value: a string, list, or tuple

    Returns:
        list

    Examples:
        "web1, web2" -> ["web1", "web2"]
        ("t1", "t2") -> ["t1", "t2"]
        None -> []

    """
    if value is None:
        return []
    if isstring(value):
        value = value.split(",")
    return [x.strip() for x in value if x is not None and x.strip()]


from panconfig.base import connect  # noqa: E402
