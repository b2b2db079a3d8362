import os
from unittest import mock

import pytest

from hattip.config import DEFAULT_TIMEOUT, NamedValueFromEnvironment, load_timeout


def test_value_preset():
    v = NamedValueFromEnvironment("FOO", "foo", "bar")
    assert v.name == "foo"
    assert v.value == "bar"


@mock.patch.dict(os.environ, {"FOO": "bar"})
def test_value_from_envvar():
    v = NamedValueFromEnvironment("FOO", "foo")
    assert v.name == "FOO"
    assert v.value == "bar"


@mock.patch.dict(os.environ, {"FOO": "bar"})
def test_value_preset_takes_precedence():
    v = NamedValueFromEnvironment("FOO", "foo", "hi!")
    assert v.name == "foo"
    assert str(v) == "hi!"


@mock.patch.dict(os.environ, {}, clear=True)
def test_value_default():
    v = NamedValueFromEnvironment("FOO", "foo", default="baz")
    assert v.name == "foo"
    assert v.value == "baz"


@mock.patch.dict(os.environ, {}, clear=True)
def test_default_timeout():
    assert load_timeout() == DEFAULT_TIMEOUT


@mock.patch.dict(os.environ, {"HATTIP_TIMEOUT": "2.5"})
def test_timeout_from_envvar():
    assert load_timeout() == 2.5


@mock.patch.dict(os.environ, {"HATTIP_TIMEOUT": "2.5"})
def test_timeout_argument_takes_precedence():
    assert load_timeout(10) == 10.0


@mock.patch.dict(os.environ, {"HATTIP_TIMEOUT": "soon"})
def test_invalid_timeout_from_envvar():
    with pytest.raises(ValueError, match="HATTIP_TIMEOUT"):
        load_timeout()


def test_invalid_timeout_argument():
    with pytest.raises(ValueError, match="timeout"):
        load_timeout(0)
