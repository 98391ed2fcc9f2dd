"""
EasyCrypto Protocol Layer
=========================

Semantic message structures and their wire representation. The protocol
layer MUST NOT depend on any transport implementation.

Layers, top to bottom:

Message Model (message.py)
    Immutable Request and Response value objects.

Field Vocabulary (fields.py)
    Canonical names for envelope fields and operations.

Codec (codec.py)
    Maps Request/Response <-> datagram bytes: a flat JSON object encoded
    with a fixed text encoding shared by both ends.
"""

from . import fields
from . import message
from . import codec

from .message import Request, Response
from .codec import MalformedMessage


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
