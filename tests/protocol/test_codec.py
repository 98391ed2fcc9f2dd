import easycrypto
import pytest

from easycrypto.protocol import MalformedMessage, Request, Response, codec


messages = (
    Request('capabilities', id=0),
    Request('encrypt', 'rot13', 'Hello, World!', 1),
    Request('decrypt', 'reverse', '', 2),
    Request('encrypt', 'rot13', 'Grüße, 世界 ✓ "quoted" \\ backslash\n', 3),
    Response(0, 'capabilities', 0, 'rot13,reverse'),
    Response(1, 'encrypt', 0, 'Uryyb, Jbeyq!'),
    Response(4294967296, 'decrypt', 1, 'unknown method: unknown-cipher'),
    Response(5, 'encrypt', 0, ''),
)


@pytest.mark.parametrize('message', messages, ids=repr)
def test_round_trip(message):

    encoded = codec.encode(message)
    assert isinstance(encoded, bytes)
    assert codec.decode(encoded) == message


def test_default_encoding_is_utf16():

    encoded = codec.encode(Request('encrypt', 'rot13', 'abc', 9))
    text = encoded.decode('utf-16')
    assert easycrypto.json.loads(text) == {'id': 9, 'operation': 'encrypt', 'method': 'rot13', 'data': 'abc'}


def test_explicit_encoding():

    message = Request('encrypt', 'rot13', 'Grüße', 2)

    encoded = codec.encode(message, 'utf-8')
    assert 'Grüße'.encode('utf-8') in encoded
    assert codec.decode(encoded, 'utf-8') == message


def test_encoding_must_match():

    encoded = codec.encode(Request('encrypt', 'rot13', 'abc', 2), 'utf-8')

    # An odd number of bytes cannot be UTF-16; an even number decodes to
    # garbage that is not JSON. Either way the mismatch is reported.

    with pytest.raises(MalformedMessage):
        codec.decode(encoded + b' ', 'utf-16')

    with pytest.raises(MalformedMessage):
        codec.decode(encoded + b'  ', 'utf-16')


def test_envelope_fields():

    request = wire(Request('capabilities', id=0))
    assert request == {'id': 0, 'operation': 'capabilities'}

    response = wire(Response(1, 'encrypt', 0, 'n'))
    assert response == {'id': 1, 'operation': 'encrypt', 'result': 0, 'data': 'n'}


def test_result_code_enum():

    response = Response(1, 'encrypt', easycrypto.method.ResultCode.ERROR, 'bad')
    assert wire(response)['result'] == 2


def test_encode_errors():

    with pytest.raises(ValueError):
        codec.encode(Request('encrypt', 'rot13', 'no id yet'))

    with pytest.raises(TypeError):
        codec.encode({'id': 1, 'operation': 'encrypt'})


def test_unknown_fields_dropped():

    decoded = codec.decode(raw({'id': 3, 'operation': 'encrypt', 'method': 'rot13', 'data': 'x', 'extra': [1, 2]}))
    assert decoded == Request('encrypt', 'rot13', 'x', 3)

    decoded = codec.decode(raw({'id': 3, 'operation': 'capabilities', 'method': 'rot13'}))
    assert decoded == Request('capabilities', id=3)


def test_optional_fields():

    assert codec.decode(raw({'id': 3, 'operation': 'encrypt', 'method': 'rot13'})) == Request('encrypt', 'rot13', '', 3)
    assert codec.decode(raw({'id': 3, 'operation': 'encrypt', 'result': 0})) == Response(3, 'encrypt', 0, '')


def test_id_as_decimal_string():

    decoded = codec.decode(raw({'id': '12', 'operation': 'capabilities'}))
    assert decoded.id == 12


malformed = (
    b'',
    b'\x00',
    b'{"id": 1',
    'not json at all'.encode('utf-16'),
    '{"id": 1, "operation": "encrypt", "method": "rot13"'.encode('utf-16'),
    '[1, 2, 3]'.encode('utf-16'),
    '"just a string"'.encode('utf-16'),
    '{}'.encode('utf-16'),
    ('[' * 20000).encode('utf-16'),
    r'{"id": 1, "operation": "encrypt", "method": "rot13", "data": "\ud800"}'.encode('utf-16'),
    r'{"id": 1, "operation": "encrypt", "result": 0, "data": "x\udfff"}'.encode('utf-16'),
)


@pytest.mark.parametrize('data', malformed, ids=repr)
def test_malformed_bytes(data):

    with pytest.raises(MalformedMessage):
        codec.decode(data)


bad_envelopes = (
    {'operation': 'capabilities'},
    {'id': 1},
    {'id': -1, 'operation': 'capabilities'},
    {'id': 1.5, 'operation': 'capabilities'},
    {'id': True, 'operation': 'capabilities'},
    {'id': 'seven', 'operation': 'capabilities'},
    {'id': '-7', 'operation': 'capabilities'},
    {'id': None, 'operation': 'capabilities'},
    {'id': 1, 'operation': 5},
    {'id': 1, 'operation': 'frobnicate'},
    {'id': 1, 'operation': 'encrypt'},
    {'id': 1, 'operation': 'encrypt', 'method': ''},
    {'id': 1, 'operation': 'decrypt', 'method': 13},
    {'id': 1, 'operation': 'encrypt', 'method': 'rot13', 'data': None},
    {'id': 1, 'operation': 'encrypt', 'result': '0'},
    {'id': 1, 'operation': 'encrypt', 'result': False},
    {'id': 1, 'operation': 'encrypt', 'result': 0, 'data': 42},
)


@pytest.mark.parametrize('envelope', bad_envelopes, ids=repr)
def test_malformed_envelope(envelope):

    with pytest.raises(MalformedMessage):
        codec.decode(raw(envelope))


def test_malformed_is_value_error():

    assert issubclass(MalformedMessage, ValueError)


def wire(message):
    return easycrypto.json.loads(codec.encode(message).decode('utf-16'))


def raw(envelope):
    return easycrypto.json.dumps(envelope).decode('utf-8').encode('utf-16')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
