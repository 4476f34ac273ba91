"""
Property-Based Tests for msgverifier
====================================

Uses Hypothesis to generate random inputs and verify invariants:
1. Round-trip: verify(generate(v)) == v
2. Tamper detection: changing any single character is rejected
3. Digest determinism: same input, same digest
4. Wire format: base64 data, one separator, fixed-length lowercase hex digest
"""

import base64
import string

import pytest
from hypothesis import given, settings, HealthCheck
from hypothesis import strategies as st

from msgverifier import InvalidSignature, MessageVerifier

SECRET = b"s3cr3t-32-bytes-minimum-xxxxxxxx"

VERIFIER = MessageVerifier(secret=SECRET, serializer="json")
PICKLE_VERIFIER = MessageVerifier(secret=SECRET, serializer="pickle", digest="sha256")


# =============================================================================
# Hypothesis Strategies
# =============================================================================

json_scalars = st.one_of(
    st.text(max_size=50),
    st.integers(min_value=-(2**63), max_value=2**63 - 1),
    st.floats(allow_nan=False, allow_infinity=False),
    st.booleans(),
    st.none(),
)

json_values = st.recursive(
    json_scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=5),
        st.dictionaries(st.text(max_size=10), children, max_size=5),
    ),
    max_leaves=20,
)

# Characters that can appear in a signed message
wire_alphabet = string.ascii_letters + string.digits + "+/=-"


# =============================================================================
# Properties
# =============================================================================


@given(value=json_values)
@settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
def test_json_round_trip(value):
    """Any JSON value survives generate/verify unchanged."""
    assert VERIFIER.verify(VERIFIER.generate(value)) == value


@given(
    value=st.one_of(
        json_values,
        st.binary(max_size=64),
        st.frozensets(st.integers(), max_size=5),
        st.tuples(st.integers(), st.text(max_size=5)),
    )
)
@settings(max_examples=100)
def test_pickle_round_trip(value):
    """Any picklable value survives generate/verify unchanged."""
    assert PICKLE_VERIFIER.verify(PICKLE_VERIFIER.generate(value)) == value


@given(value=json_values, data=st.data())
@settings(max_examples=200)
def test_single_character_tamper_detected(value, data):
    """Changing any one character of a signed message is rejected."""
    signed = VERIFIER.generate(value)
    index = data.draw(st.integers(min_value=0, max_value=len(signed) - 1))
    replacement = data.draw(
        st.sampled_from(wire_alphabet).filter(lambda c: c != signed[index])
    )
    tampered = signed[:index] + replacement + signed[index + 1:]

    with pytest.raises(InvalidSignature):
        VERIFIER.verify(tampered)


@given(text=st.text(max_size=100))
def test_digest_deterministic(text):
    """The digest depends only on the input."""
    assert VERIFIER.digest_for(text) == VERIFIER.digest_for(text)


@given(value=json_values)
@settings(max_examples=100)
def test_wire_format(value):
    """Signed messages have base64 data and a 40 character hex digest."""
    signed = VERIFIER.generate(value)

    assert signed.count("--") == 1
    data, digest = signed.split("--")
    assert data
    assert base64.b64encode(base64.b64decode(data, validate=True)).decode() == data
    assert len(digest) == 2 * VERIFIER.digest_size == 40
    assert set(digest) <= set("0123456789abcdef")
