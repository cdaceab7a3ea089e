import json
from datetime import date

import pytest

from shopee_analytics import DashboardService, FilterCriteria, IngestionError


@pytest.fixture
def dashboard(sample_orders):
    return DashboardService(sample_orders)


class TestDashboardService:
    def test_orders_are_stored_immutably(self, sample_orders):
        service = DashboardService(sample_orders)
        sample_orders.clear()
        assert len(service.orders) == 5
        assert isinstance(service.orders, tuple)

    def test_metrics_with_and_without_filters(self, dashboard):
        assert dashboard.metrics().total_revenue == pytest.approx(210.0)

        only_sp = dashboard.metrics(FilterCriteria(states=["SP"]))
        assert only_sp.total_revenue == pytest.approx(150.0)
        assert only_sp.total_orders == 2

    def test_filtered_views_share_criteria(self, dashboard):
        criteria = FilterCriteria(start_date="2025-01-01", end_date="2025-01-31")

        assert [i.product for i in dashboard.abc_curve(criteria).items] == [
            "Camiseta Básica",
            "Boné Trucker",
        ]
        assert dashboard.best_days(criteria).best_day.day == "2025-01-01"
        assert sum(h.orders for h in dashboard.sales_by_hour(criteria)) == 3
        assert sum(w.orders for w in dashboard.sales_by_weekday(criteria)) == 3
        assert [s.state for s in dashboard.state_ranking(criteria)] == ["SP", "RJ"]
        assert [p.product for p in dashboard.product_table(criteria)] == [
            "Camiseta Básica",
            "Boné Trucker",
        ]

    def test_filter_options_ignore_criteria(self, dashboard):
        options = dashboard.filter_options()
        assert options.states == ["MG", "RJ", "SP"]

    def test_product_details_and_cards(self, dashboard):
        details = dashboard.product_details("Caneca Personalizada")
        assert details.stats.quantity == 4

        cards = dashboard.summary_cards(date(2025, 2, 10), FilterCriteria(states=["MG"]))
        assert cards.total_orders == 1
        assert cards.revenue_today == pytest.approx(20.0)

    def test_date_coverage(self, dashboard):
        assert dashboard.date_coverage().months == ["2025-01", "2025-02"]

    def test_snapshot_is_json_serializable(self, dashboard):
        snapshot = dashboard.snapshot()

        assert set(snapshot) == {
            "metrics",
            "abc_curve",
            "best_day",
            "top_days",
            "sales_by_hour",
            "sales_by_weekday",
            "variations",
            "states",
        }
        assert snapshot["metrics"]["total_orders"] == 5
        assert snapshot["abc_curve"]["counts"] == {"A": 1, "B": 1, "C": 1}
        assert snapshot["best_day"]["day"] == "2025-01-01"
        assert snapshot["top_days"][0]["avg_ticket"] == pytest.approx(75.0)
        assert len(snapshot["sales_by_hour"]) == 24
        assert snapshot["sales_by_hour"][10]["hour"] == "10:00"
        assert snapshot["sales_by_weekday"][0]["weekday"] == "Domingo"
        assert snapshot["states"][0]["avg_ticket"] == pytest.approx(75.0)
        json.dumps(snapshot)

    def test_snapshot_without_matches(self, dashboard):
        snapshot = dashboard.snapshot(FilterCriteria(states=["AC"]))

        assert snapshot["metrics"]["total_orders"] == 0
        assert snapshot["best_day"] is None
        assert snapshot["top_days"] == []
        assert snapshot["abc_curve"]["top"] == []

    def test_from_file(self):
        content = json.dumps(
            [
                {"ID do pedido": "1", "Valor Total": "10,00", "Data de criação do pedido": "2025-01-01 09:00"},
                {"ID do pedido": "2", "Valor Total": "5,00", "Data de criação do pedido": "2025-01-01 10:00"},
            ]
        )
        service = DashboardService.from_file(content, filename="pedidos.json")
        assert service.metrics().total_revenue == pytest.approx(15.0)

    def test_from_file_propagates_structural_errors(self):
        with pytest.raises(IngestionError):
            DashboardService.from_file(b"", filename="pedidos.csv")
