# src/medicao_financeiro/acumulado.py
from __future__ import annotations

from typing import Iterable

from .models import MedicaoItem, TotalContratoPorItem, TotaisPorItem
from .utils.utils_num import round2


def agrupar_totais_por_item(itens: Iterable[MedicaoItem]) -> TotaisPorItem:
    """
    Soma o `total` gravado de cada linha por item_code (ordem da primeira ocorrência).
    Não reavalia pelo pct: o `total` já está em reais. Arredonda a cada soma.
    """
    out: TotaisPorItem = {}
    for it in itens:
        code = it["item_code"]
        out[code] = round2(out.get(code, 0.0) + it["total"])
    return out


def aplicar_teto(totais: TotaisPorItem, total_contrato_por_item: TotalContratoPorItem) -> TotaisPorItem:
    """Limita cada item ao seu valor contratado; extracontratuais não têm teto."""
    out: TotaisPorItem = {}
    for code, valor in totais.items():
        teto = total_contrato_por_item.get(code)
        out[code] = min(valor, teto) if teto is not None and teto > 0 else valor
    return out


def calcular_valor_acumulado(
    itens: Iterable[MedicaoItem],
    total_contrato_por_item: TotalContratoPorItem,
) -> float:
    """Valor acumulado global: soma dos itens já com teto aplicado."""
    por_item = aplicar_teto(agrupar_totais_por_item(itens), total_contrato_por_item)
    return round2(sum(por_item.values()))


def calcular_percentual(valor: float, total_contrato: float) -> float:
    """Percentual executado, sempre em [0, 100]. Sem total de contrato -> 0."""
    if total_contrato <= 0:
        return 0.0
    return max(min(valor / total_contrato * 100, 100.0), 0.0)
