from tax_lookup.loader import parse_dataset
from tax_lookup.models import MessageType
from tax_lookup.normalizer import build_record
from tax_lookup.search import find_record, search


def test_hyphenated_query_finds_record():
    records = [build_record(["01", "8077806911-001", "ACME", "10", "1000", "5000"])]
    outcome = search(records, "8077-806911-001")
    assert outcome.found
    assert outcome.record.name == "ACME"
    assert outcome.message.type == MessageType.SUCCESS
    assert "8077-806911-001" in outcome.message.text


def test_not_found_message_quotes_typed_query(sample_csv):
    outcome = search(parse_dataset(sample_csv), " 999-999 ")
    assert not outcome.found
    assert outcome.message.type == MessageType.ERROR
    assert " 999-999 " in outcome.message.text


def test_blank_query_is_a_no_op(sample_csv):
    records = parse_dataset(sample_csv)
    assert search(records, "") is None
    assert search(records, "   ") is None
    assert search(records, " - ") is None


def test_first_match_wins(acme):
    twin = acme.model_copy(update={"name": "ACME (second)"})
    assert find_record([acme, twin], "8077806911001").name == "ACME"


def test_quotes_and_spaces_in_query(acme):
    assert find_record([acme], "'8077 806911 001'") == acme
