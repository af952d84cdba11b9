# src/medicao_financeiro/marcos.py
from __future__ import annotations

import logging
from typing import List

from .acumulado import calcular_valor_acumulado, calcular_percentual
from .models import MedicaoSession, MedicaoItem, Marco, TotalContratoPorItem
from .utils.utils_num import round2

logger = logging.getLogger(__name__)


def ordenar_sessoes(sessoes: List[MedicaoSession]) -> List[MedicaoSession]:
    """Ordem cronológica = `sequencia` crescente (estável para sequências repetidas)."""
    return sorted(sessoes, key=lambda s: s["sequencia"])


def calcular_marcos(
    sessoes: List[MedicaoSession],
    itens: List[MedicaoItem],
    total_contrato_por_item: TotalContratoPorItem,
    total_contrato: float,
) -> List[Marco]:
    """
    Um marco por medição, na ordem de `sequencia`.

    O acumulado até a medição i é recalculado do zero sobre as medições [0..i],
    com teto por item. Assim um item que já bateu o teto numa medição anterior
    não volta a somar depois. valor_medicao = acumulado(0..i) - acumulado(0..i-1).
    """
    ordenadas = ordenar_sessoes(sessoes)

    conhecidas = {s["id"] for s in ordenadas}
    orfas = sum(1 for it in itens if it["medicao_id"] not in conhecidas)
    if orfas:
        logger.warning(
            "%d linha(s) de medição apontam para medição inexistente; ficam fora dos marcos.", orfas
        )

    marcos: List[Marco] = []
    ids_ate_aqui: set[str] = set()
    acumulado_anterior = 0.0

    for sessao in ordenadas:
        ids_ate_aqui.add(sessao["id"])
        prefixo = [it for it in itens if it["medicao_id"] in ids_ate_aqui]
        acumulado = calcular_valor_acumulado(prefixo, total_contrato_por_item)

        marcos.append(Marco(
            sequencia=sessao["sequencia"],
            valor_medicao=round2(acumulado - acumulado_anterior),
            valor_acumulado=acumulado,
            percentual_acumulado=calcular_percentual(acumulado, total_contrato),
        ))
        acumulado_anterior = acumulado

    return marcos
