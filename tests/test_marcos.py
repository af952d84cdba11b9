"""
Tests for the per-session milestone calculation.
"""

import pytest

from medicao_financeiro.marcos import calcular_marcos, ordenar_sessoes


def _linha(code, total, medicao_id):
    return {"item_code": code, "pct": 0.0, "total": total, "medicao_id": medicao_id}


class TestOrdenarSessoes:
    """Test chronological ordering."""

    def test_sorted_by_sequencia(self, sessoes):
        """Sessions come back in `sequencia` order."""
        assert [s["id"] for s in ordenar_sessoes(sessoes)] == ["m1", "m2", "m3"]


class TestCalcularMarcos:
    """Test milestone values."""

    def test_milestones(self, sessoes, itens_medicao):
        """Period and cumulative values per session, with cap applied on m3."""
        marcos = calcular_marcos(sessoes, itens_medicao, {"1.1": 1000.0, "1.2": 2000.0}, 4000.0)

        assert [m["sequencia"] for m in marcos] == [1, 2, 3]
        assert [m["valor_medicao"] for m in marcos] == [700.0, 700.0, 300.0]
        assert [m["valor_acumulado"] for m in marcos] == [700.0, 1400.0, 1700.0]
        assert [m["percentual_acumulado"] for m in marcos] == pytest.approx([17.5, 35.0, 42.5])

    def test_capped_item_does_not_readmit_room(self):
        """An item capped in session 1 adds nothing in session 2."""
        sessoes = [{"id": "a", "sequencia": 1}, {"id": "b", "sequencia": 2}]
        itens = [_linha("1.1", 1200.0, "a"), _linha("1.1", 100.0, "b")]

        marcos = calcular_marcos(sessoes, itens, {"1.1": 1000.0}, 1000.0)

        assert marcos[0]["valor_medicao"] == 1000.0
        assert marcos[1]["valor_medicao"] == 0.0
        assert marcos[1]["valor_acumulado"] == 1000.0
        assert marcos[1]["percentual_acumulado"] == 100.0

    def test_additivity(self, sessoes, itens_medicao):
        """Cumulative = previous cumulative + this period."""
        marcos = calcular_marcos(sessoes, itens_medicao, {"1.1": 1000.0, "1.2": 2000.0}, 4000.0)

        for anterior, atual in zip(marcos, marcos[1:]):
            assert atual["valor_acumulado"] == pytest.approx(
                anterior["valor_acumulado"] + atual["valor_medicao"], abs=0.01
            )

    def test_session_without_lines(self):
        """An empty session repeats the previous cumulative value."""
        sessoes = [{"id": "a", "sequencia": 1}, {"id": "b", "sequencia": 2}]
        marcos = calcular_marcos(sessoes, [_linha("9", 50.0, "a")], {}, 100.0)

        assert marcos[1]["valor_medicao"] == 0.0
        assert marcos[1]["valor_acumulado"] == 50.0

    def test_orphan_lines_excluded(self, caplog):
        """Lines pointing to unknown sessions stay out of milestones and are logged."""
        sessoes = [{"id": "a", "sequencia": 1}]
        itens = [_linha("9", 50.0, "a"), _linha("9", 70.0, "zzz")]

        marcos = calcular_marcos(sessoes, itens, {}, 1000.0)

        assert marcos[0]["valor_acumulado"] == 50.0
        assert "medição inexistente" in caplog.text

    def test_no_sessions(self):
        """Scenario D: no sessions, no milestones."""
        assert calcular_marcos([], [], {}, 0.0) == []

    def test_percentages_bounded(self):
        """Milestone percentages stay within [0, 100]."""
        sessoes = [{"id": "a", "sequencia": 1}, {"id": "b", "sequencia": 2}]
        itens = [_linha("9", 5000.0, "a"), _linha("8", -9000.0, "b")]

        for m in calcular_marcos(sessoes, itens, {}, 1000.0):
            assert 0.0 <= m["percentual_acumulado"] <= 100.0
