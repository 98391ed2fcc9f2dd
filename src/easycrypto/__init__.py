""" Python implementation of EasyCrypto: a minimal encryption service. A
    client sends capabilities, encrypt and decrypt requests to a service over
    UDP; the service applies the named cipher method and answers with a
    response carrying the same request id, which the client matches up in
    the background.
"""

# Utility components.

from . import json
from . import config

# Cipher methods and their lookup.

from . import method
from . import registry

# Wire format and transport.

from . import protocol
from . import transport

# Primary public-facing interfaces.

from . import correlator
from . import client
from . import service

from .client import Client, connect
from .service import Server

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
