''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps` for the
    EasyCrypto envelope.

    Whichever backend is active, :func:`dumps` returns bytes and every
    failure to parse in :func:`loads` surfaces as :class:`DecodeError`.
'''

# Conditional imports keep the less efficient libraries out of the picture
# when a faster one is installed. The standard library is the last resort.

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


class DecodeError(ValueError):
    """ The input could not be parsed as JSON by the active backend.
    """


def json_dumps(*args, **kwargs):
    return json.dumps(*args, ensure_ascii=False, **kwargs).encode()


if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    _loads = decoder.decode
    _failures = (msgspec.DecodeError, ValueError)
elif orjson is not None:
    dumps = orjson.dumps
    _loads = orjson.loads
    _failures = (orjson.JSONDecodeError, ValueError)
else:
    dumps = json_dumps
    _loads = json.loads
    _failures = (ValueError,)

# The standard library parser is recursive; a deeply nested array exhausts
# the interpreter stack rather than raising a ValueError.

_failures = _failures + (RecursionError,)


def loads(data):
    """ Parse *data*, which may be bytes or str.
    """

    try:
        return _loads(data)
    except _failures as e:
        raise DecodeError('%s: %s' % (e.__class__.__name__, e)) from None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
