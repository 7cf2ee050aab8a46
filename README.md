# abicodec

A library for working with contract ABIs: encode values into the standard
32-byte-word ABI layout, describe parameter types and event parameters,
encode constructor calls, build event topic filters and decode event logs.

## Installation

```
pip install abicodec
```

## Tokens

Values to encode are `Token` objects from `abicodec.token`, each tagged with
a `TokenKind`:

| Kind                            | Value                 |
|---------------------------------|-----------------------|
| `ADDRESS`                       | `bytes`, 20 bytes long |
| `FIXED_BYTES`, `BYTES`          | `bytes`               |
| `INT`, `UINT`                   | `int` that fits in 256 bits (signed for `INT`) |
| `BOOL`                          | `bool`                |
| `STRING`                        | `str`                 |
| `FIXED_ARRAY`, `ARRAY`, `TUPLE` | a sequence of `Token` |

A value of the wrong type raises `TypeError`; an address of the wrong length
or an integer out of range raises `ValueError`. `Token.is_dynamic()` tells
whether the token is encoded in the tail behind an offset (bytes, strings,
dynamic arrays, and fixed arrays or tuples holding any of these).

## Encoding

```python
from abicodec.encoder import encode
from abicodec.token import Token, TokenKind

data = encode([
    Token(TokenKind.UINT, 5),
    Token(TokenKind.STRING, "hello"),
])
```

`encode` writes static values in place and dynamic values after the head
section, each referenced by its offset. Negative `INT` values are written in
two's complement. `pad_u32(value)` returns a value between 0 and 2³²−1 as a
32-byte big-endian word, as used for lengths and offsets.

## Parameter types

`abicodec.event_param` defines `ParamType`, tagged with a `ParamKind`:
`size` carries the bit width of `INT`/`UINT`, the byte length of
`FIXED_BYTES` and the length of `FIXED_ARRAY`; `inner` the element type of
arrays; `components` the member types of a tuple. `ParamType.is_dynamic()`
mirrors `Token.is_dynamic()`.

- `parse_param_type(text)` reads names such as `uint256`, `bytes32`,
  `address[]`, `uint8[2][]`, `(address,bool)` or `tuple`, and raises
  `InvalidData` on anything else.
- `format_param_type(kind)` gives the canonical name used in signatures,
  spelling tuples as `(type,...)`.

`EventParam(name, kind, indexed=False)` describes one event input.
`EventParam.from_dict` reads its ABI JSON object (filling tuple types from
nested `components`) and `EventParam.to_dict` writes it back, with tuples
spelled `tuple` and their members under `components`.

## Constructors

`abicodec.constructor` holds `Param(name, kind, internal_type=None)` and
`Constructor(inputs)`. `Constructor.param_types()` lists the input types;
`Constructor.encode_input(code, tokens)` appends the encoded tokens to the
contract code, raising `InvalidData` when they do not match the inputs.

`type_check(token, kind)` and `types_check(tokens, kinds)` perform that
check on their own. A `FIXED_BYTES` token matches a fixed-bytes type at least
as long as its value; fixed arrays must have exactly the declared length.

## Events

`abicodec.event.Event(name, inputs, anonymous=False)`:

- `signature()` is the Keccak-256 hash of `name(type,...)`; the same hash is
  available for any name and types through `long_signature(name, kinds)`.
- `filter(*topics)` takes up to three values for the indexed inputs, in
  order. Each is `None` (match anything), a `Token` (match that value) or an
  iterable of tokens (match any of them). It returns a `TopicFilter` with
  `topic0` to `topic3`; for a non-anonymous event `topic0` is the signature.
  A token is stored as its 32-byte encoding, or as the Keccak-256 hash of the
  encoding when that is longer. A value for an input that does not exist, or
  a token of the wrong type, raises `InvalidData`.
- `parse_log(topics, data)` checks the signature topic (unless the event is
  anonymous), decodes the indexed values from the topics and the rest from
  `data`, and returns a list of `LogParam(name, value)` in declaration order.
  Indexed strings, bytes, arrays and tuples come back as their 32-byte
  `FIXED_BYTES` hash.
- `from_dict` and `to_dict` read and write the event's ABI JSON object, with
  the fields `name`, `inputs` and `anonymous`.

## Errors

All errors raised for bad ABI data derive from `abicodec.errors.AbiError`.
`InvalidData` reports data that does not match the expected types or
layout; `InvalidName` carries an unknown entity name in its `name` attribute.

## What it does not do

There is no loader for a whole contract ABI file and no description of
contract functions: the package works with individual constructors, event
parameters and events. Decoding is offered only through `Event.parse_log`;
there is no public function for decoding arbitrary ABI data.

## Running the tests

```
pip install -e ".[test]"
pytest
```