import pytest

from photoserver.services.sizes import (
    PASSTHROUGH,
    SIZE_TOKENS,
    BoundingBox,
    Passthrough,
    ScaleFactor,
    plan_from,
    resolve,
)


@pytest.mark.parametrize(
    "token,expected",
    [
        ("full", ScaleFactor(1)),
        ("half", ScaleFactor(2)),
        ("quarter", ScaleFactor(4)),
        ("eighth", ScaleFactor(8)),
        ("xsmall", BoundingBox(80, 80)),
        ("medium", BoundingBox(320, 320)),
        ("large", BoundingBox(640, 480)),
        ("xxxxlarge", BoundingBox(1600, 1200)),
        ("tivo", BoundingBox(320, 320)),
        ("blog", BoundingBox(852, 852)),
        ("home", BoundingBox(990, 990)),
    ],
)
def test_named_sizes(token, expected):
    assert resolve(token) == expected


@pytest.mark.parametrize("token", ["unknown-token", "", None, "HALF", "medium "])
def test_unknown_tokens_serve_original(token):
    assert isinstance(resolve(token), Passthrough)


def test_every_vocabulary_token_resolves_to_a_transform():
    for token in SIZE_TOKENS:
        assert not isinstance(resolve(token), Passthrough), token


@pytest.mark.parametrize("raw", [(0, 0, 0), (0, 320, 0), (0, 0, 240), (-2, 0, 0), (0, -80, 80)])
def test_degenerate_table_values_are_passthrough(raw):
    assert plan_from(*raw) is PASSTHROUGH


def test_factor_takes_precedence_over_box():
    assert plan_from(2, 100, 100) == ScaleFactor(2)
