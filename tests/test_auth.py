import pytest

from notely.auth import (
    AuthError,
    MalformedAuthHeaderError,
    NoAuthHeaderError,
    get_api_key,
)


def test_valid_api_key():
    assert get_api_key({"Authorization": "ApiKey secret"}) == "secret"


def test_valid_api_key_list_value():
    assert get_api_key({"Authorization": ["ApiKey secret"]}) == "secret"


def test_header_name_is_case_insensitive():
    assert get_api_key({"authorization": "ApiKey token"}) == "token"


def test_missing_authorization_header():
    with pytest.raises(NoAuthHeaderError) as info:
        get_api_key({})
    assert str(info.value) == "no authorization header included"


def test_empty_authorization_header():
    with pytest.raises(NoAuthHeaderError) as info:
        get_api_key({"Authorization": ""})
    assert str(info.value) == "no authorization header included"


@pytest.mark.parametrize(
    "value",
    ["Bearer token", "ApiKey"],
    ids=["wrong scheme", "incomplete value"],
)
def test_malformed_header(value):
    with pytest.raises(MalformedAuthHeaderError) as info:
        get_api_key({"Authorization": value})
    assert str(info.value) == "malformed authorization header"


def test_errors_share_base_class():
    with pytest.raises(AuthError):
        get_api_key({"Authorization": "Bearer token"})
    with pytest.raises(AuthError):
        get_api_key({})


def test_double_space_yields_empty_key():
    assert get_api_key({"Authorization": "ApiKey  token"}) == ""