import pytest
import requests

from tax_lookup.errors import DataFetchError
from tax_lookup.loader import DatasetStore, fetch_csv_text, load_dataset, parse_dataset

from conftest import FakeResponse, FakeSession


def test_parse_dataset_skips_header_and_bad_rows(sample_csv):
    records = parse_dataset(sample_csv)
    assert [r.tax_id for r in records] == ["8077806911001", "0101234567", "123456"]

    hoa_sen = records[1]
    assert hoa_sen.authority_code == "10"
    assert hoa_sen.name == 'Công ty "Hoa Sen"'
    assert hoa_sen.invoice_count == 1234
    assert hoa_sen.tax_amount == 12345678
    assert hoa_sen.total_amount == 135802458

    assert records[2].invoice_count == 0
    assert records[2].name == "Unspecified"


def test_header_is_never_parsed_as_data():
    assert parse_dataset("01,8077806911001,ACME,1,1,1") == []


def test_fetch_raises_on_bad_status():
    session = FakeSession(FakeResponse("nope", status_code=500))
    with pytest.raises(DataFetchError):
        fetch_csv_text("http://example.test/data.csv", 5, session=session)


def test_fetch_raises_on_network_error():
    session = FakeSession(requests.ConnectionError("down"))
    with pytest.raises(DataFetchError):
        fetch_csv_text("http://example.test/data.csv", 5, session=session)


def test_load_dataset_uses_url_and_timeout(sample_csv):
    session = FakeSession(FakeResponse(sample_csv))
    records = load_dataset("http://example.test/data.csv", 3, session=session)
    assert len(records) == 3
    assert session.calls == [("http://example.test/data.csv", 3)]


def test_failed_reload_keeps_previous_dataset(sample_csv):
    session = FakeSession(
        FakeResponse(sample_csv),
        requests.ConnectionError("down"),
        FakeResponse("h\n01,999999,Only,1,1,1\n"),
    )
    store = DatasetStore(url="http://example.test/data.csv", session=session)

    first = store.reload()
    assert len(first) == 3

    with pytest.raises(DataFetchError):
        store.reload()
    assert store.records == first

    store.reload()
    assert [r.tax_id for r in store.records] == ["999999"]


def test_reload_twice_does_not_duplicate(sample_csv):
    session = FakeSession(FakeResponse(sample_csv), FakeResponse(sample_csv))
    store = DatasetStore(url="http://example.test/data.csv", session=session)
    store.reload()
    store.reload()
    assert len(store.records) == 3


def test_stats_sum_invoice_counts(sample_csv):
    store = DatasetStore(url="http://x.test", session=FakeSession(FakeResponse(sample_csv)))
    store.ensure_loaded()
    stats = store.stats()
    assert stats.total_records == 3
    assert stats.total_invoices == 10 + 1234 + 0


def test_ensure_loaded_fetches_once(sample_csv):
    session = FakeSession(FakeResponse(sample_csv))
    store = DatasetStore(url="http://x.test", session=session)
    store.ensure_loaded()
    store.ensure_loaded()
    assert len(session.calls) == 1
