"""
Pytest configuration and fixtures.
"""

import pytest


@pytest.fixture
def orcamento_hierarquico():
    """Orçamento com itens macro ("1", "2") e folhas; "2.1" é folha sem valor."""
    return [
        {"item": "1", "total_contrato": 3000.0},
        {"item": "1.1", "total_contrato": 1000.0},
        {"item": "1.2", "total_contrato": 2000.0},
        {"item": "2", "total_contrato": 500.0},
        {"item": "2.1", "total_contrato": 0.0, "origem": "contratual"},
    ]


@pytest.fixture
def aditivos():
    """Aditivos já bloqueados."""
    return [{"total": 1000.0}]


@pytest.fixture
def sessoes():
    """Três medições, fora de ordem de propósito."""
    return [
        {"id": "m2", "sequencia": 2},
        {"id": "m1", "sequencia": 1},
        {"id": "m3", "sequencia": 3},
    ]


@pytest.fixture
def itens_medicao():
    """
    m1: 1.1 = 500, 1.2 = 200
    m2: 1.1 = 400, 2.5 (extracontratual) = 300
    m3: 1.1 = 300 (estoura o teto de 1000), 1.2 = 200
    """
    return [
        {"item_code": "1.1", "pct": 50, "total": 500.0, "medicao_id": "m1"},
        {"item_code": "1.2", "pct": 10, "total": 200.0, "medicao_id": "m1"},
        {"item_code": "1.1", "pct": 40, "total": 400.0, "medicao_id": "m2"},
        {"item_code": "2.5", "pct": 0, "total": 300.0, "medicao_id": "m2"},
        {"item_code": "1.1", "pct": 30, "total": 300.0, "medicao_id": "m3"},
        {"item_code": "1.2", "pct": 10, "total": 200.0, "medicao_id": "m3"},
    ]


@pytest.fixture
def dados_obra(orcamento_hierarquico, aditivos, sessoes, itens_medicao):
    """Snapshot completo no formato dos adapters."""
    return {
        "orcamento": orcamento_hierarquico,
        "aditivos": aditivos,
        "sessoes": sessoes,
        "itens_medicao": itens_medicao,
        "obra_valor_total": 0.0,
        "obra_valor_aditivado": 0.0,
    }
