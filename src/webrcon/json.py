""" JSON codec for envelope frames. The first library found among msgspec,
    orjson, and the standard library's json module is used for the whole
    process.

    Envelopes travel as WebSocket text frames, so :func:`dumps` always
    returns a str, and :func:`loads` accepts either str or bytes. Every
    exception a malformed frame can raise while decoding is collected in
    :data:`errors`.
"""

import functools

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


if msgspec is not None:
    backend = 'msgspec'
    _encode = msgspec.json.Encoder().encode
    loads = msgspec.json.Decoder().decode
    errors = (msgspec.DecodeError, UnicodeDecodeError)
elif orjson is not None:
    backend = 'orjson'
    _encode = orjson.dumps
    loads = orjson.loads
    errors = (orjson.JSONDecodeError, UnicodeDecodeError)
else:
    backend = 'json'
    _encode = functools.partial(json.dumps, ensure_ascii=False, separators=(',', ':'))
    loads = json.loads
    errors = (json.JSONDecodeError, UnicodeDecodeError)


def dumps(value):
    """ Return the JSON encoding of *value* as the text of a single frame.
        msgspec and orjson produce UTF-8 bytes; the standard library already
        produces text.
    """

    encoded = _encode(value)

    if isinstance(encoded, bytes):
        encoded = encoded.decode('utf-8')

    return encoded


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
