from . import fields
from . import message
from . import wire


"""
WebRCON Protocol Layer
======================

This package defines the transport-agnostic half of the client: what an
envelope is, how identifiers are assigned, and how an envelope is turned
into a text frame and back.

The protocol layer MUST NOT depend on any transport implementation.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Session (webrcon.session)
    connect() / Session.execute() / Session.close()
    Identifier correlation, deadlines

    │
    ▼
Framing (wire.py)
    Envelope <-> JSON text frame

    │
    ▼
Message Model (message.py)
    - Envelope
    - Identifiers

    │
    ▼
Field Vocabulary (fields.py)
    Canonical wire keys, message kinds, limits

---------------------------------------------------------------------

Below the Protocol Layer
------------------------

Transport Layer (webrcon.transport)
    Moves text frames over a WebSocket

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
