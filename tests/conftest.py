import pytest

from shopee_analytics.domain.models import Order


def build_order(**overrides) -> Order:
    fields = {
        "order_id": "250101ABC",
        "status": "Concluído",
        "product_name": "Camiseta Básica",
        "variation_name": "",
        "quantity": 1,
        "unit_price_agreed": 0.0,
        "total_value": 0.0,
        "created_at": "2025-01-01 10:00",
        "state": "SP",
        "buyer_username": "comprador01",
    }
    fields.update(overrides)
    return Order(**fields)


@pytest.fixture
def make_order():
    """Fábrica de pedidos com valores padrão."""
    return build_order


@pytest.fixture
def sample_orders():
    """Pequeno export com estados, status e datas variados."""
    return [
        build_order(order_id="A1", product_name="Camiseta Básica", total_value=100.0, quantity=2,
                    unit_price_agreed=50.0, created_at="2025-01-01 10:15", state="SP",
                    status="Concluído", buyer_username="maria.silva", variation_name="Azul,M"),
        build_order(order_id="A1", product_name="Boné Trucker", total_value=50.0, quantity=1,
                    unit_price_agreed=50.0, created_at="2025-01-01 10:15", state="SP",
                    status="Concluído", buyer_username="maria.silva"),
        build_order(order_id="B2", product_name="Camiseta Básica", total_value=30.0, quantity=1,
                    unit_price_agreed=30.0, created_at="02/01/2025 18:40", state="RJ",
                    status="Cancelado", buyer_username="joao_p", variation_name="Azul,M"),
        build_order(order_id="C3", product_name="Caneca Personalizada", total_value=20.0, quantity=4,
                    unit_price_agreed=5.0, created_at="2025-02-10T09:00:00", state="MG",
                    status="Em trânsito", buyer_username="ana.costa", variation_name="Branca"),
        build_order(order_id="D4", product_name="Boné Trucker", total_value=10.0, quantity=1,
                    unit_price_agreed=10.0, created_at="data inválida", state="",
                    status="Concluído", buyer_username="pedro"),
    ]
