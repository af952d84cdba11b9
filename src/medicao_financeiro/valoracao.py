# src/medicao_financeiro/valoracao.py
from __future__ import annotations

from .models import MedicaoItem, TotalContratoPorItem
from .utils.utils_num import round2


def calcular_valor_item_medicao(
    item: MedicaoItem,
    total_contrato_por_item: TotalContratoPorItem,
) -> float:
    """
    Valor financeiro de uma linha de medição:
    - item contratual (folha com total_contrato > 0): pct × total_contrato
    - item extracontratual (sem valor contratado): o próprio `total`
    """
    total_contrato = total_contrato_por_item.get(item["item_code"])
    if total_contrato is not None and total_contrato > 0:
        return round2(item["pct"] / 100 * total_contrato)
    return round2(item["total"])
