# src/medicao_financeiro/totais.py
from __future__ import annotations

import logging
from typing import List

from .indice import itens_folha
from .models import OrcamentoItem, AditivoItem, TotaisContrato

logger = logging.getLogger(__name__)


def calcular_totais_contrato(
    orcamento: List[OrcamentoItem],
    aditivos: List[AditivoItem],
    obra_valor_total: float = 0.0,
    obra_valor_aditivado: float = 0.0,
) -> TotaisContrato:
    """Total do contrato = folhas do orçamento + aditivos bloqueados.

    - Com planilha (soma das folhas > 0): orçamento + aditivos.
    - Sem planilha (contrato por preço global): usa os valores da obra, e os
      totais de orçamento/aditivo reportados são esses valores, não os zeros
      da planilha.
    """
    total_orcamento = sum(o["total_contrato"] for o in itens_folha(orcamento))
    total_aditivo = sum(a["total"] for a in aditivos)
    tem_planilha = total_orcamento > 0

    if tem_planilha:
        return TotaisContrato(
            total_contrato_orcamento=total_orcamento,
            total_aditivo=total_aditivo,
            total_contrato=total_orcamento + total_aditivo,
            tem_planilha=True,
        )

    logger.debug("Obra sem planilha itemizada; usando valores globais da obra.")
    if obra_valor_total == 0 and obra_valor_aditivado == 0 and (orcamento or aditivos):
        logger.warning(
            "Orçamento sem valor nas folhas e obra sem valor global: total do contrato será 0."
        )
    return TotaisContrato(
        total_contrato_orcamento=obra_valor_total,
        total_aditivo=obra_valor_aditivado,
        total_contrato=obra_valor_total + obra_valor_aditivado,
        tem_planilha=False,
    )
