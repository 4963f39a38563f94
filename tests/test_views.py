"""Listing filters and pagination."""
import pytest

from conftest import make_record
from workerverify.processing.views import (
    DashboardFilters,
    ListingState,
    StatusFilter,
    apply_filters,
    department_options,
    paginate,
    reconcile_filters,
    total_pages,
)


def _ids(records):
    return [record.id for record in records]


def test_no_filters_keep_everything(sample_records):
    assert apply_filters(sample_records, DashboardFilters()) == sample_records


def test_status_filter(sample_records):
    assert _ids(apply_filters(sample_records, DashboardFilters(status=StatusFilter.VERIFIED))) == [2, 3, 4]
    assert _ids(apply_filters(sample_records, DashboardFilters(status=StatusFilter.UNVERIFIED))) == [1, 5]


def test_filters_combine_as_conjunction(sample_records):
    filters = DashboardFilters(status=StatusFilter.UNVERIFIED, factory="2", department="Packing")

    assert _ids(apply_filters(sample_records, filters)) == [5]


def test_search_matches_name_or_nik_case_insensitively(sample_records):
    assert _ids(apply_filters(sample_records, DashboardFilters(search="DEWI"))) == [3]
    assert _ids(apply_filters(sample_records, DashboardFilters(search="4567890"))) == [1, 3]
    assert apply_filters(sample_records, DashboardFilters(search="3201000011112222")) == []


def test_filtering_is_idempotent(sample_records):
    filters = DashboardFilters(status=StatusFilter.VERIFIED, factory="3", search="a")
    once = apply_filters(sample_records, filters)

    assert apply_filters(once, filters) == once


def test_department_options_follow_factory(sample_records):
    assert department_options(sample_records) == ["Cutting", "Packing", "Sewing"]
    assert department_options(sample_records, "3") == ["Packing", "Sewing"]


def test_reconcile_drops_department_missing_from_factory(sample_records):
    stale = DashboardFilters(factory="3", department="Cutting")
    valid = DashboardFilters(factory="2", department="Cutting")

    assert reconcile_filters(sample_records, stale).department is None
    assert reconcile_filters(sample_records, valid) == valid


def test_pages_cover_filtered_sequence_without_overlap():
    records = [make_record(index) for index in range(1, 24)]

    pages = [paginate(records, 10, number) for number in range(1, total_pages(len(records), 10) + 1)]

    assert [len(page.items) for page in pages] == [10, 10, 3]
    assert [item for page in pages for item in page.items] == records
    assert pages[1].start_index == 10


def test_page_number_is_clamped():
    records = [make_record(index) for index in range(1, 22)]

    assert paginate(records, 21, 5).number == 1
    assert paginate(records, 10, 0).number == 1
    assert paginate(records, 10, 99).number == 3


def test_empty_listing_has_single_empty_page():
    page = paginate([], 10, 4)

    assert page.number == 1
    assert page.items == []
    assert page.total_pages == 0


def test_invalid_page_size_is_rejected():
    with pytest.raises(ValueError):
        paginate([], 0, 1)


def test_changing_filters_resets_page():
    state = ListingState().with_page(3)

    same = state.with_filters(DashboardFilters())
    changed = state.with_filters(DashboardFilters(search="siti"))

    assert same.page == 3
    assert changed.page == 1
    assert changed.filters.search == "siti"
