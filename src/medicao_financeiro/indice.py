# src/medicao_financeiro/indice.py
from __future__ import annotations

import logging
from typing import List

from .models import OrcamentoItem, TotalContratoPorItem

logger = logging.getLogger(__name__)


def eh_item_folha(codigo: str, todos: List[OrcamentoItem]) -> bool:
    """Item folha = nenhum outro código começa com "<codigo>."."""
    prefixo = codigo + "."
    return not any(o["item"].startswith(prefixo) for o in todos)


def itens_folha(todos: List[OrcamentoItem]) -> List[OrcamentoItem]:
    """Itens folha na ordem de entrada (itens 'macro' são só estrutura)."""
    return [o for o in todos if eh_item_folha(o["item"], todos)]


def build_total_contrato_por_item(todos: List[OrcamentoItem]) -> TotalContratoPorItem:
    """
    Mapa código -> total_contrato apenas para folhas com valor > 0.

    Folha com valor 0 fica de fora de propósito: a medição desse código
    cai na regra extracontratual (usa o `total` informado).
    Códigos repetidos: o último vence.
    """
    out: TotalContratoPorItem = {}
    for o in itens_folha(todos):
        if o["total_contrato"] > 0:
            if o["item"] in out:
                logger.warning(
                    "Código duplicado no orçamento: %r (substituindo %.2f → %.2f)",
                    o["item"], out[o["item"]], o["total_contrato"],
                )
            out[o["item"]] = o["total_contrato"]
    logger.debug("Índice do orçamento: %d folha(s) com valor contratado.", len(out))
    return out
