from __future__ import annotations

from pyrtdb.reference import Reference

URI = "https://my-db.firebaseio.com"


def _users() -> Reference:
    return Reference.from_url(URI).at("users")


def test_serialisation_is_lexical_regardless_of_call_order() -> None:
    first = _users().with_params().order_by("name").limit_to_first(10).finish()
    second = _users().with_params().limit_to_first(10).order_by("name").finish()

    assert first == second
    assert first.get_uri() == f"{URI}/users.json?limitToFirst=10&orderBy=name"


def test_every_builder_uses_its_rest_token() -> None:
    ref = (
        _users()
        .with_params()
        .order_by("age")
        .start_at(18)
        .end_at(65)
        .equal_to(30)
        .limit_to_first(5)
        .limit_to_last(3)
        .shallow(True)
        .format()
        .finish()
    )
    query = ref.url.query
    assert query["orderBy"] == "age"
    assert query["startAt"] == "18"
    assert query["endAt"] == "65"
    assert query["equalTo"] == "30"
    assert query["limitToFirst"] == "5"
    assert query["limitToLast"] == "3"
    assert query["shallow"] == "true"
    assert query["format"] == "export"
    assert list(query.keys()) == sorted(query.keys())


def test_auth_parameter_is_kept() -> None:
    ref = Reference.with_auth(URI, "secret").at("users").with_params().limit_to_last(2).finish()
    assert ref.get_uri() == f"{URI}/users.json?auth=secret&limitToLast=2"


def test_values_are_percent_encoded() -> None:
    ref = _users().with_params().order_by("first name").equal_to("Zoë").finish()
    assert " " not in ref.get_uri()
    assert "ë" not in ref.get_uri()
    assert ref.url.query["orderBy"] == "first name"
    assert ref.url.query["equalTo"] == "Zoë"


def test_builder_returns_new_values() -> None:
    base = _users().with_params()
    limited = base.limit_to_first(1)

    assert base.params == ()
    assert limited.params == (("limitToFirst", "1"),)


def test_same_parameter_twice_keeps_last_value() -> None:
    ref = _users().with_params().limit_to_first(1).limit_to_first(7).finish()
    assert ref.url.query.getall("limitToFirst") == ["7"]


def test_finish_without_parameters_returns_equal_reference() -> None:
    assert _users().with_params().finish() == _users()
