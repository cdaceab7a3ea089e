from datetime import date, datetime

import pytest

from shopee_analytics.domain.filters import FilterCriteria
from shopee_analytics.services.aggregation_service import aggregate
from shopee_analytics.services.filter_service import apply_filters


def _ids(orders):
    return [o.order_id for o in orders]


class TestFilterCriteria:
    def test_defaults_are_empty(self):
        criteria = FilterCriteria()
        assert criteria.is_empty()
        assert not criteria.has_date_range()

    def test_reversed_range_is_swapped(self):
        criteria = FilterCriteria(start_date="2025-01-31", end_date="2025-01-01")
        assert criteria.start_date == date(2025, 1, 1)
        assert criteria.end_date == date(2025, 1, 31)

    def test_accepts_brazilian_and_native_dates(self):
        criteria = FilterCriteria(start_date="05/01/2025", end_date=datetime(2025, 1, 9, 18, 0))
        assert criteria.start_date == date(2025, 1, 5)
        assert criteria.end_date == date(2025, 1, 9)

    def test_unreadable_date_means_no_constraint(self):
        criteria = FilterCriteria(start_date="amanhã", end_date="")
        assert criteria.start_date is None
        assert criteria.end_date is None
        assert criteria.is_empty()

    def test_blank_lists_and_search_are_dropped(self):
        criteria = FilterCriteria(statuses=[], states=["", "  "], products=None, search="   ")
        assert criteria.statuses is None
        assert criteria.states is None
        assert criteria.search is None
        assert criteria.is_empty()

    def test_single_string_becomes_list(self):
        assert FilterCriteria(states="SP").states == ["SP"]


class TestApplyFilters:
    def test_none_keeps_everything_in_order(self, sample_orders):
        assert apply_filters(sample_orders) == sample_orders
        assert apply_filters(sample_orders, FilterCriteria()) == sample_orders

    def test_status_filter(self, sample_orders):
        result = apply_filters(sample_orders, FilterCriteria(statuses=["Concluído"]))
        assert _ids(result) == ["A1", "A1", "D4"]

    def test_metrics_recomputed_over_filtered_subset(self, sample_orders):
        result = apply_filters(sample_orders, FilterCriteria(statuses=["Cancelado"]))
        metrics = aggregate(result)

        assert _ids(result) == ["B2"]
        assert metrics.total_orders == 1
        assert metrics.total_revenue == pytest.approx(30.0)

    def test_status_is_exact_match(self, sample_orders):
        assert apply_filters(sample_orders, FilterCriteria(statuses=["concluído"])) == []

    def test_state_filter(self, sample_orders):
        result = apply_filters(sample_orders, FilterCriteria(states=["RJ", "MG"]))
        assert _ids(result) == ["B2", "C3"]

    def test_product_substring_ignores_case(self, sample_orders):
        result = apply_filters(sample_orders, FilterCriteria(products=["camiseta"]))
        assert _ids(result) == ["A1", "B2"]

    def test_any_product_needle_matches(self, sample_orders):
        result = apply_filters(sample_orders, FilterCriteria(products=["CANECA", "trucker"]))
        assert _ids(result) == ["A1", "C3", "D4"]

    @pytest.mark.parametrize(
        "term, expected",
        [
            ("maria", ["A1", "A1"]),
            ("b2", ["B2"]),
            ("mg", ["C3"]),
            ("boné", ["A1", "D4"]),
            ("inexistente", []),
        ],
    )
    def test_search_covers_product_order_buyer_and_state(self, sample_orders, term, expected):
        assert _ids(apply_filters(sample_orders, FilterCriteria(search=term))) == expected

    def test_date_bounds_are_inclusive(self, sample_orders):
        criteria = FilterCriteria(start_date="2025-01-01", end_date="2025-01-02")
        assert _ids(apply_filters(sample_orders, criteria)) == ["A1", "A1", "B2"]

    def test_end_date_covers_whole_day(self, make_order):
        late = make_order(order_id="L1", created_at="2025-01-02 23:59")
        criteria = FilterCriteria(end_date="2025-01-02")
        assert apply_filters([late], criteria) == [late]

    def test_unparseable_dates_are_excluded_by_date_filter(self, sample_orders):
        criteria = FilterCriteria(start_date="2020-01-01")
        result = apply_filters(sample_orders, criteria)
        assert "D4" not in _ids(result)
        assert len(result) == 4

    def test_unparseable_dates_kept_without_date_filter(self, sample_orders):
        result = apply_filters(sample_orders, FilterCriteria(statuses=["Concluído"]))
        assert "D4" in _ids(result)

    def test_reversed_range_filters_like_ordered(self, sample_orders):
        ordered = FilterCriteria(start_date="2025-01-02", end_date="2025-02-28")
        reversed_ = FilterCriteria(start_date="2025-02-28", end_date="2025-01-02")
        assert apply_filters(sample_orders, ordered) == apply_filters(sample_orders, reversed_)
        assert _ids(apply_filters(sample_orders, ordered)) == ["B2", "C3"]

    def test_criteria_are_combined_with_and(self, sample_orders):
        criteria = FilterCriteria(states=["SP"], products=["boné"], start_date="2025-01-01")
        assert _ids(apply_filters(sample_orders, criteria)) == ["A1"]

    def test_result_is_subset_preserving_order(self, sample_orders):
        result = apply_filters(sample_orders, FilterCriteria(search="a"))
        positions = [sample_orders.index(o) for o in result]
        assert positions == sorted(positions)

    def test_matches_single_order(self, make_order):
        criteria = FilterCriteria(states=["SP"])
        assert criteria.matches(make_order(state="SP"))
        assert not criteria.matches(make_order(state="BA"))
