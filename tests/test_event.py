import pytest

from abicodec.encoder import encode
from abicodec.errors import InvalidData
from abicodec.event import Event, LogParam, TopicFilter, long_signature
from abicodec.event_param import EventParam, ParamKind, ParamType
from abicodec.token import Token, TokenKind

INT256 = ParamType(ParamKind.INT, size=256)
UINT256 = ParamType(ParamKind.UINT, size=256)
ADDRESS = ParamType(ParamKind.ADDRESS)
STRING = ParamType(ParamKind.STRING)
INT256_ARRAY = ParamType(ParamKind.ARRAY, inner=INT256)
ADDRESS_5 = ParamType(ParamKind.FIXED_ARRAY, size=5, inner=ADDRESS)

TRANSFER_SIG = bytes.fromhex("ddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef")


def h(text):
    return bytes.fromhex("".join(text.split()))


def transfer_event(anonymous=False):
    return Event(
        name="Transfer",
        inputs=[
            EventParam("from", ADDRESS, True),
            EventParam("to", ADDRESS, True),
            EventParam("value", UINT256, False),
        ],
        anonymous=anonymous,
    )


def test_decoding_event():
    event = Event(
        name="foo",
        inputs=[
            EventParam("a", INT256, False),
            EventParam("b", INT256, True),
            EventParam("c", ADDRESS, False),
            EventParam("d", ADDRESS, True),
            EventParam("e", STRING, True),
            EventParam("f", INT256_ARRAY, True),
            EventParam("g", ADDRESS_5, True),
        ],
        anonymous=False,
    )
    topics = [
        long_signature("foo", [INT256, INT256, ADDRESS, ADDRESS, STRING, INT256_ARRAY, ADDRESS_5]),
        h("0000000000000000000000000000000000000000000000000000000000000002"),
        h("0000000000000000000000001111111111111111111111111111111111111111"),
        h("00000000000000000aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"),
        h("00000000000000000bbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"),
        h("00000000000000000ccccccccccccccccccccccccccccccccccccccccccccccc"),
    ]
    data = h(
        """
        0000000000000000000000000000000000000000000000000000000000000003
        0000000000000000000000002222222222222222222222222222222222222222
        """
    )
    result = event.parse_log(topics, data)
    assert result == [
        LogParam("a", Token(TokenKind.INT, 3)),
        LogParam("b", Token(TokenKind.INT, 2)),
        LogParam("c", Token(TokenKind.ADDRESS, b"\x22" * 20)),
        LogParam("d", Token(TokenKind.ADDRESS, b"\x11" * 20)),
        LogParam("e", Token(TokenKind.FIXED_BYTES, topics[3])),
        LogParam("f", Token(TokenKind.FIXED_BYTES, topics[4])),
        LogParam("g", Token(TokenKind.FIXED_BYTES, topics[5])),
    ]


def test_transfer_signature():
    assert transfer_event().signature() == TRANSFER_SIG


def test_long_signature_of_known_text():
    assert long_signature("Transfer", [ADDRESS, ADDRESS, UINT256]) == TRANSFER_SIG


def test_filter_non_anonymous():
    sender = Token(TokenKind.ADDRESS, b"\x11" * 20)
    result = transfer_event().filter(sender)
    assert result == TopicFilter(
        topic0=TRANSFER_SIG,
        topic1=h("0000000000000000000000001111111111111111111111111111111111111111"),
        topic2=None,
        topic3=None,
    )


def test_filter_anonymous_uses_first_topic():
    sender = Token(TokenKind.ADDRESS, b"\x11" * 20)
    receiver = Token(TokenKind.ADDRESS, b"\x22" * 20)
    result = transfer_event(anonymous=True).filter(None, receiver)
    assert result.topic0 is None
    assert result.topic1 == b"\0" * 12 + b"\x22" * 20
    assert result.topic2 is None
    assert result.topic3 is None
    assert transfer_event(anonymous=True).filter(sender).topic0 == b"\0" * 12 + b"\x11" * 20


def test_filter_one_of():
    first = Token(TokenKind.ADDRESS, b"\x11" * 20)
    second = Token(TokenKind.ADDRESS, b"\x22" * 20)
    result = transfer_event().filter([first, second])
    assert result.topic1 == (b"\0" * 12 + b"\x11" * 20, b"\0" * 12 + b"\x22" * 20)


def test_filter_wildcard():
    assert transfer_event().filter() == TopicFilter(TRANSFER_SIG, None, None, None)


def test_filter_rejects_wrong_type():
    with pytest.raises(InvalidData):
        transfer_event().filter(Token(TokenKind.BOOL, True))


def test_filter_rejects_topic_without_indexed_param():
    value = Token(TokenKind.ADDRESS, b"\x33" * 20)
    with pytest.raises(InvalidData):
        transfer_event().filter(None, None, value)


def test_filter_rejects_too_many_topics():
    with pytest.raises(TypeError):
        transfer_event().filter(None, None, None, None)


def test_filter_hashes_long_values():
    event = Event("Named", [EventParam("label", STRING, True)])
    result = event.filter(Token(TokenKind.STRING, "gavofyork"))
    assert len(result.topic1) == 32
    assert result.topic1 not in encode([Token(TokenKind.STRING, "gavofyork")])


def test_parse_log_transfer():
    topics = [TRANSFER_SIG, b"\0" * 12 + b"\x11" * 20, b"\0" * 12 + b"\x22" * 20]
    data = (1000).to_bytes(32, "big")
    assert transfer_event().parse_log(topics, data) == [
        LogParam("from", Token(TokenKind.ADDRESS, b"\x11" * 20)),
        LogParam("to", Token(TokenKind.ADDRESS, b"\x22" * 20)),
        LogParam("value", Token(TokenKind.UINT, 1000)),
    ]


def test_parse_log_anonymous():
    topics = [b"\0" * 12 + b"\x11" * 20, b"\0" * 12 + b"\x22" * 20]
    data = (7).to_bytes(32, "big")
    result = transfer_event(anonymous=True).parse_log(topics, data)
    assert [param.value for param in result] == [
        Token(TokenKind.ADDRESS, b"\x11" * 20),
        Token(TokenKind.ADDRESS, b"\x22" * 20),
        Token(TokenKind.UINT, 7),
    ]


def test_parse_log_bad_signature():
    topics = [b"\0" * 32, b"\0" * 32, b"\0" * 32]
    with pytest.raises(InvalidData):
        transfer_event().parse_log(topics, (1).to_bytes(32, "big"))


def test_parse_log_missing_signature():
    with pytest.raises(InvalidData):
        transfer_event().parse_log([], b"")


def test_parse_log_extra_topic():
    topics = [TRANSFER_SIG, b"\0" * 32, b"\0" * 32, b"\0" * 32]
    with pytest.raises(InvalidData):
        transfer_event().parse_log(topics, (1).to_bytes(32, "big"))


def test_parse_log_short_data():
    topics = [TRANSFER_SIG, b"\0" * 32, b"\0" * 32]
    with pytest.raises(InvalidData):
        transfer_event().parse_log(topics, b"\x01" * 16)


def test_parse_log_dynamic_data_round_trip():
    event = Event(
        "Note",
        [
            EventParam("text", STRING, False),
            EventParam("values", ParamType(ParamKind.ARRAY, inner=UINT256), False),
            EventParam("flag", ParamType(ParamKind.BOOL), False),
        ],
    )
    tokens = [
        Token(TokenKind.STRING, "gavofyork"),
        Token(TokenKind.ARRAY, [Token(TokenKind.UINT, 5), Token(TokenKind.UINT, 6)]),
        Token(TokenKind.BOOL, True),
    ]
    result = event.parse_log([event.signature()], encode(tokens))
    assert [param.value for param in result] == tokens
    assert [param.name for param in result] == ["text", "values", "flag"]


def test_dict_round_trip():
    data = {
        "name": "Transfer",
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
        "anonymous": False,
    }
    event = Event.from_dict(data)
    assert event == transfer_event()
    assert event.to_dict() == data


def test_from_dict_requires_anonymous():
    with pytest.raises(InvalidData):
        Event.from_dict({"name": "foo", "inputs": []})


def test_from_dict_rejects_bad_inputs():
    with pytest.raises(InvalidData):
        Event.from_dict({"name": "foo", "inputs": "address", "anonymous": False})