"""
Tests for the boundary normalization pass.
"""

import pytest

from medicao_financeiro.normalizar import (
    EntradaInvalidaError,
    normalizar_dados,
    normalizar_itens_medicao,
    normalizar_orcamento,
    normalizar_sessoes,
)
from medicao_financeiro.processor import calcular_financeiro_medicao
from medicao_financeiro.utils.utils_code import norm_code, norm_id


class TestNormalizarOrcamento:
    """Test budget row normalization."""

    def test_codes_stripped_keep_leading_zeros(self):
        """Codes are stripped but '01.02' is not turned into '1.2'."""
        out = normalizar_orcamento([{"item": " 01.02 ", "total_contrato": "150"}])
        assert out == [{"item": "01.02", "total_contrato": 150.0}]

    def test_origem_kept_when_present(self):
        """Optional tag survives; absent tag is not invented."""
        out = normalizar_orcamento([
            {"item": "1", "total_contrato": 1, "origem": "extracontratual"},
            {"item": "2", "total_contrato": 1, "origem": None},
        ])
        assert out[0]["origem"] == "extracontratual"
        assert "origem" not in out[1]

    def test_none_code(self):
        """Missing code becomes empty string."""
        assert normalizar_orcamento([{"item": None}])[0]["item"] == ""

    def test_thousands_separator_in_text(self):
        """A pt-BR sheet value "1.500" is 1500, and the contract total follows."""
        orcamento = [{"item": "1", "total_contrato": "1.500"}]
        assert normalizar_orcamento(orcamento)[0]["total_contrato"] == 1500.0

        res = calcular_financeiro_medicao(orcamento, [], [], [])
        assert res["total_contrato"] == 1500.0


class TestNormCode:
    """Test item code keys."""

    @pytest.mark.parametrize("raw,esperado", [
        (" 1.2 ", "1.2"),
        ("1 . 2", "1.2"),
        ("1.2.", "1.2"),
        ("01.02", "01.02"),
        (None, ""),
        (float("nan"), ""),
    ])
    def test_forms(self, raw, esperado):
        """Typing noise is removed; leading zeros are significant."""
        assert norm_code(raw) == esperado

    def test_noisy_codes_match_leaf_map(self):
        """Budget "1.2." and measured "1 . 2" land on the same key."""
        orcamento = normalizar_orcamento([
            {"item": "1", "total_contrato": 0},
            {"item": "1.2.", "total_contrato": 1000},
        ])
        itens = normalizar_itens_medicao([{"item_code": "1 . 2", "pct": 50, "medicao_id": "m1"}])
        assert orcamento[1]["item"] == itens[0]["item_code"] == "1.2"

    def test_norm_id_keeps_inner_spaces(self):
        """Session ids are only trimmed."""
        assert norm_id(" med 1 ") == "med 1"
        assert norm_id(7) == "7"


class TestNormalizarSessoes:
    """Test session normalization."""

    def test_sequencia_is_int(self):
        """Sequence numbers are integers even when given as text."""
        out = normalizar_sessoes([{"id": 7, "sequencia": "3"}])
        assert out == [{"id": "7", "sequencia": 3}]

    @pytest.mark.parametrize("seq", ["1.9", 2.5])
    def test_fractional_sequencia_rejected(self, seq):
        """A fractional sequence is not truncated into another position."""
        with pytest.raises(EntradaInvalidaError) as exc:
            normalizar_sessoes([{"id": "m1", "sequencia": 1}, {"id": "m2", "sequencia": seq}])
        assert exc.value.indice == 1
        assert exc.value.campo == "sequencia"
        assert "não inteira" in str(exc.value)

    def test_integral_float_sequencia_accepted(self):
        """Spreadsheets often deliver 2.0 for 2."""
        assert normalizar_sessoes([{"id": "m2", "sequencia": "2.0"}])[0]["sequencia"] == 2


class TestNormalizarItensMedicao:
    """Test measurement line normalization."""

    def test_missing_fields(self):
        """Missing pct/total default to zero."""
        out = normalizar_itens_medicao([{"item_code": "1.1", "medicao_id": "m1"}])
        assert out == [{"item_code": "1.1", "pct": 0.0, "total": 0.0, "medicao_id": "m1"}]

    def test_invalid_reports_position(self):
        """Error names collection, row and field."""
        with pytest.raises(EntradaInvalidaError) as exc:
            normalizar_itens_medicao([
                {"item_code": "1.1", "total": 1},
                {"item_code": "1.2", "total": "xx"},
            ])
        assert exc.value.colecao == "itens_medicao"
        assert exc.value.indice == 1
        assert exc.value.campo == "total"
        assert "itens_medicao[1].total" in str(exc.value)


class TestNormalizarDados:
    """Test the whole snapshot pass."""

    def test_none_collections(self):
        """None collections are treated as empty."""
        dados = normalizar_dados(None, None, None, None, None, None)
        assert dados["orcamento"] == []
        assert dados["obra_valor_total"] == 0.0

    def test_invalid_fallback_value(self):
        """Contract-level values are validated too."""
        with pytest.raises(EntradaInvalidaError) as exc:
            normalizar_dados([], [], [], [], obra_valor_total="dez mil")
        assert exc.value.colecao == "obra"
        assert exc.value.indice is None

    def test_is_value_error(self):
        """Callers catching ValueError also catch input errors."""
        assert issubclass(EntradaInvalidaError, ValueError)
