from mongodb_connection_string import CaseInsensitiveSearchParams


def test_parses_query_with_or_without_question_mark():
    assert CaseInsensitiveSearchParams("?a=1&b=2").items() == [("a", "1"), ("b", "2")]
    assert CaseInsensitiveSearchParams("a=1&b=2").items() == [("a", "1"), ("b", "2")]
    assert len(CaseInsensitiveSearchParams("")) == 0


def test_keeps_blank_values():
    params = CaseInsensitiveSearchParams("a=&b")
    assert params.items() == [("a", ""), ("b", "")]
    assert params.has("B")


def test_get_returns_first_match_or_none():
    params = CaseInsensitiveSearchParams("readPreference=primary&READPREFERENCE=secondary")
    assert params.get("readpreference") == "primary"
    assert params.get_all("ReadPreference") == ["primary", "secondary"]
    assert params.get("missing") is None
    assert params.get_all("missing") == []


def test_set_collapses_duplicates_and_keeps_stored_casing():
    params = CaseInsensitiveSearchParams("a=1&B=2&A=3")
    params.set("a", "9")
    assert params.items() == [("a", "9"), ("B", "2")]

    params.set("B", 4)
    assert params.items() == [("a", "9"), ("B", "4")]


def test_set_appends_unknown_key_with_given_casing():
    params = CaseInsensitiveSearchParams("w=1")
    params.set("appName", "tool")
    assert params.items() == [("w", "1"), ("appName", "tool")]


def test_append_keeps_existing_entries():
    params = CaseInsensitiveSearchParams("readPreferenceTags=dc:ny")
    params.append("READPREFERENCETAGS", "dc:sf")
    params.append("maxPoolSize", "5")
    assert params.items() == [
        ("readPreferenceTags", "dc:ny"),
        ("readPreferenceTags", "dc:sf"),
        ("maxPoolSize", "5"),
    ]


def test_delete_removes_every_match():
    params = CaseInsensitiveSearchParams("a=1&b=2&A=3")
    params.delete("A")
    assert params.items() == [("b", "2")]
    assert "a" not in params


def test_serialization_encodes_keys_and_values():
    params = CaseInsensitiveSearchParams()
    params.set("appName", "my app/1")
    params.append("authMechanismProperties", "SERVICE_NAME:other")
    assert str(params) == "appName=my+app%2F1&authMechanismProperties=SERVICE_NAME%3Aother"


def test_on_change_is_called_for_mutations():
    calls = []
    params = CaseInsensitiveSearchParams("a=1", on_change=lambda: calls.append(True))
    params.set("a", "2")
    params.append("a", "3")
    params.delete("a")
    assert len(calls) == 3


def test_copy_is_independent():
    params = CaseInsensitiveSearchParams("a=1")
    duplicate = params.copy()
    duplicate.set("a", "2")
    duplicate.append("b", "3")
    assert params.items() == [("a", "1")]
    assert duplicate == CaseInsensitiveSearchParams("a=2&b=3")


def test_iteration_and_views():
    params = CaseInsensitiveSearchParams("a=1&b=2")
    assert list(params) == [("a", "1"), ("b", "2")]
    assert params.keys() == ["a", "b"]
    assert params.values() == ["1", "2"]
    assert len(params) == 2
