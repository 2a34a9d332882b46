from tax_lookup.config import UNKNOWN_AUTHORITY, UNSPECIFIED_NAME
from tax_lookup.normalizer import COERCION_DEFAULTS, build_record, build_records, coerce_fields


def test_full_row():
    record = build_record(["01", "8077806911-001", "ACME", "10", "1000", "5000"])
    assert record.tax_id == "8077806911001"
    assert record.authority_code == "01"
    assert record.name == "ACME"
    assert record.invoice_count == 10
    assert record.tax_amount == 1000
    assert record.total_amount == 5000


def test_short_tax_id_is_rejected():
    assert build_record(["01", "12-3", "X", "1", "1", "1"]) is None


def test_too_few_columns_is_rejected():
    assert build_record(["01"]) is None
    assert build_record([""]) is None


def test_unparseable_numbers_default_to_zero():
    record = build_record(["01", "123456", "X", "abc", "", "1000"])
    assert record.invoice_count == 0
    assert record.tax_amount == 0
    assert record.total_amount == 1000


def test_missing_columns_use_defaults():
    record = build_record(["", "123456"])
    assert record.authority_code == UNKNOWN_AUTHORITY
    assert record.name == UNSPECIFIED_NAME
    assert record.invoice_count == record.tax_amount == record.total_amount == 0


def test_authority_float_suffix_is_stripped():
    assert build_record(["10.0", "123456"]).authority_code == "10"
    assert build_record(["10", "123456"]).authority_code == "10"


def test_blank_name_uses_sentinel():
    assert build_record(["01", "123456", "   "]).name == UNSPECIFIED_NAME


def test_coercion_table_covers_every_defaulted_field():
    assert set(COERCION_DEFAULTS) == {
        "authority_code", "name", "invoice_count", "tax_amount", "total_amount",
    }
    assert coerce_fields([]) == {
        "authority_code": UNKNOWN_AUTHORITY,
        "name": UNSPECIFIED_NAME,
        "invoice_count": 0.0,
        "tax_amount": 0.0,
        "total_amount": 0.0,
    }


def test_build_records_drops_bad_rows():
    rows = [
        ["01", "123456", "A"],
        ["01", "12"],
        ["x"],
        ["02", "654321", "B"],
    ]
    assert [r.tax_id for r in build_records(rows)] == ["123456", "654321"]


def test_bare_float_suffix_authority_falls_back_to_sentinel():
    assert build_record([".0", "123456"]).authority_code == UNKNOWN_AUTHORITY


def test_invoice_count_is_an_int():
    record = build_record(["01", "123456", "X", "1.234", "", ""])
    assert record.invoice_count == 1234
    assert isinstance(record.invoice_count, int)
