# src/medicao_financeiro/validators/consistencia.py
from __future__ import annotations

from typing import Iterable, List

from ..models import MedicaoItem, TotalContratoPorItem, DivergenciaMedicao
from ..utils.utils_num import round2
from ..valoracao import calcular_valor_item_medicao


def _dir(registrado: float, calculado: float) -> str:
    """Direção da divergência (referência = valor calculado pelo pct)."""
    if registrado > calculado:
        return "MAIOR"   # total gravado > pct × contrato
    if registrado < calculado:
        return "MENOR"
    return ""


def verificar_consistencia(
    itens: Iterable[MedicaoItem],
    total_contrato_por_item: TotalContratoPorItem,
    *,
    tol_abs: float = 0.01,
) -> List[DivergenciaMedicao]:
    """Confere se o `total` gravado bate com pct × total_contrato.

    O acumulado soma o `total` gravado; o valor de uma linha isolada vem do pct.
    Os dois só coincidem se quem gravou a medição preencheu `total` corretamente.
    Aqui só reportamos; nenhum valor é corrigido.

    - Apenas itens contratuais (extracontratuais usam o próprio `total`).
    - Divergência: |total - calculado| > tol_abs.
    """
    diverg: List[DivergenciaMedicao] = []

    for it in itens:
        if total_contrato_por_item.get(it["item_code"], 0) <= 0:
            continue

        calculado = calcular_valor_item_medicao(it, total_contrato_por_item)
        registrado = round2(it["total"])
        dif_abs = round2(abs(registrado - calculado))

        if dif_abs > tol_abs:
            diverg.append(DivergenciaMedicao(
                item_code=it["item_code"],
                medicao_id=it["medicao_id"],
                motivos=["TOTAL_DIVERGE_DO_PCT"],
                total_registrado=registrado,
                total_calculado=calculado,
                dif_abs=dif_abs,
                dir=_dir(registrado, calculado),
            ))

    return diverg
