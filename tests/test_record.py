import pytest

from mongodb_connection_string import CommaAndColonSeparatedRecord


@pytest.mark.parametrize("value", ["", None])
def test_empty_input_gives_empty_record(value):
    record = CommaAndColonSeparatedRecord(value)
    assert record.size == 0
    assert str(record) == ""


def test_default_is_empty():
    record = CommaAndColonSeparatedRecord()
    assert record.size == 0
    assert str(record) == ""


def test_getting_entries():
    record = CommaAndColonSeparatedRecord("A:B,C:D")
    assert str(record) == "A:B,C:D"
    assert record.get("A") == "B"
    assert record.get("C") == "D"
    assert record.get("foo") is None


def test_setting_entries():
    record = CommaAndColonSeparatedRecord("A:B,C:D")
    record.set("A", "0")
    record.set("E", "1")
    assert str(record) == "A:0,C:D,E:1"


def test_multiple_colon_entries():
    record = CommaAndColonSeparatedRecord("A:B:C,D")
    assert str(record) == "A:B:C,D:"
    assert record.get("A") == "B:C"
    assert record.get("D") == ""


def test_is_case_insensitive():
    record = CommaAndColonSeparatedRecord("foo:bar,FOO:BAR")
    assert str(record) == "foo:BAR"
    assert record.size == 1
    assert record.get("FOO") == "BAR"
    assert record.get("foo") == "BAR"

    record.set("FOO", "baz")
    assert str(record) == "foo:baz"


def test_duplicate_keeps_first_position():
    record = CommaAndColonSeparatedRecord("a:1,b:2,A:3")
    assert str(record) == "a:3,b:2"


def test_skips_empty_segments():
    record = CommaAndColonSeparatedRecord(",SERVICE_NAME:mongodb,,")
    assert str(record) == "SERVICE_NAME:mongodb"


def test_mapping_interface():
    record = CommaAndColonSeparatedRecord("SERVICE_NAME:mongodb,CANONICALIZE_HOST_NAME:true")
    assert "service_name" in record
    assert record.has("Canonicalize_Host_Name")
    assert record["SERVICE_NAME"] == "mongodb"
    assert list(record) == ["SERVICE_NAME", "CANONICALIZE_HOST_NAME"]
    assert dict(record) == {"SERVICE_NAME": "mongodb", "CANONICALIZE_HOST_NAME": "true"}

    record["service_realm"] = "EXAMPLE.COM"
    del record["canonicalize_host_name"]
    assert str(record) == "SERVICE_NAME:mongodb,service_realm:EXAMPLE.COM"

    assert record.delete("SERVICE_NAME")
    assert not record.delete("SERVICE_NAME")
    assert len(record) == 1

    with pytest.raises(KeyError):
        record["missing"]
