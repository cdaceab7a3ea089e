from __future__ import annotations
from typing import Dict, FrozenSet, Tuple


# -----------------------------------------------------------------------------
# 1) Colunas do export de pedidos da Shopee
# -----------------------------------------------------------------------------

ORDER_ID = "ID do pedido"
STATUS = "Status do pedido"
PRODUCT_NAME = "Nome do Produto"
VARIATION_NAME = "Nome da variação"
QUANTITY = "Quantidade"
UNIT_PRICE_AGREED = "Preço acordado"
TOTAL_VALUE = "Valor Total"
CREATED_AT = "Data de criação do pedido"
STATE = "UF"
BUYER_USERNAME = "Nome de usuário (comprador)"


# -----------------------------------------------------------------------------
# 2) Allow-list: colunas interpretadas como número
# -----------------------------------------------------------------------------

NUMERIC_COLUMNS: FrozenSet[str] = frozenset(
    [
        "Preço original",
        UNIT_PRICE_AGREED,
        QUANTITY,
        "Returned quantity",
        "Subtotal do produto",
        "Desconto do vendedor",
        "Desconto do vendedor__1",
        "Reembolso Shopee",
        "Peso total SKU",
        "Número de produtos pedidos",
        "Peso total do pedido",
        "Cupom do vendedor",
        "Seller Absorbed Coin Cashback",
        "Cupom Shopee",
        "Desconto Shopee da Leve Mais por Menos",
        "Desconto da Leve Mais por Menos do vendedor",
        "Compensar Moedas Shopee",
        "Total descontado Cartão de Crédito",
        TOTAL_VALUE,
        "Taxa de envio pagas pelo comprador",
        "Desconto de Frete Aproximado",
        "Taxa de Envio Reversa",
        "Taxa de transação",
        "Taxa de comissão",
        "Taxa de serviço",
        "Total global",
        "Valor estimado do frete",
        "CEP",
    ]
)


# -----------------------------------------------------------------------------
# 3) Colunas com atributo tipado no Order
# -----------------------------------------------------------------------------

TEXT_FIELDS: Dict[str, str] = {
    ORDER_ID: "order_id",
    STATUS: "status",
    PRODUCT_NAME: "product_name",
    VARIATION_NAME: "variation_name",
    CREATED_AT: "created_at",
    STATE: "state",
    BUYER_USERNAME: "buyer_username",
}

NUMERIC_FIELDS: Dict[str, str] = {
    QUANTITY: "quantity",
    UNIT_PRICE_AGREED: "unit_price_agreed",
    TOTAL_VALUE: "total_value",
}


# -----------------------------------------------------------------------------
# 4) Rótulos padrão e calendário
# -----------------------------------------------------------------------------

STATE_NOT_INFORMED = "Não informado"
PRODUCT_NOT_INFORMED = "Produto não informado"
STATUS_NOT_INFORMED = "Status não informado"
NO_VARIATION = "Sem variação"

# Domingo primeiro, como no calendário brasileiro
WEEKDAY_NAMES: Tuple[str, ...] = (
    "Domingo",
    "Segunda",
    "Terça",
    "Quarta",
    "Quinta",
    "Sexta",
    "Sábado",
)
