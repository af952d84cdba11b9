# src/medicao_financeiro/processor.py
"""
Cálculo financeiro das medições de uma obra.

Fonte única para: total do contrato, valor acumulado, percentual executado e marcos.
Funções puras sobre o snapshot recebido; quem chama refaz o cálculo quando
os registros mudam.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping

from .acumulado import agrupar_totais_por_item, aplicar_teto, calcular_valor_acumulado, calcular_percentual
from .indice import build_total_contrato_por_item
from .marcos import calcular_marcos
from .models import DadosMedicao, ItemAcumulado, ResultadoFinanceiro
from .normalizar import normalizar_dados
from .totais import calcular_totais_contrato
from .utils.utils_num import round2
from .validators.consistencia import verificar_consistencia

logger = logging.getLogger(__name__)

Rows = Iterable[Mapping[str, Any]]


def calcular_financeiro_medicao(
    orcamento: Rows,
    aditivos: Rows,
    sessoes: Rows,
    itens_medicao: Rows,
    obra_valor_total: object = 0.0,
    obra_valor_aditivado: object = 0.0,
) -> ResultadoFinanceiro:
    """Cálculo completo do financeiro de medições de uma obra.

    - `aditivos` já devem vir filtrados (só aditivos bloqueados).
    - `obra_valor_total`/`obra_valor_aditivado` só valem quando não há planilha itemizada.

    Levanta EntradaInvalidaError se algum campo numérico não for conversível.
    """
    dados = normalizar_dados(
        orcamento, aditivos, sessoes, itens_medicao, obra_valor_total, obra_valor_aditivado
    )

    totais = calcular_totais_contrato(
        dados["orcamento"],
        dados["aditivos"],
        dados["obra_valor_total"],
        dados["obra_valor_aditivado"],
    )
    total_contrato = totais["total_contrato"]
    total_por_item = build_total_contrato_por_item(dados["orcamento"])

    diverg = verificar_consistencia(dados["itens_medicao"], total_por_item)
    if diverg:
        logger.warning(
            "%d linha(s) de medição com `total` diferente de pct × valor contratado; "
            "o acumulado usa o `total` gravado.", len(diverg)
        )

    valor_acumulado = calcular_valor_acumulado(dados["itens_medicao"], total_por_item)
    marcos = calcular_marcos(dados["sessoes"], dados["itens_medicao"], total_por_item, total_contrato)

    return ResultadoFinanceiro(
        total_contrato_orcamento=totais["total_contrato_orcamento"],
        total_aditivo=totais["total_aditivo"],
        total_contrato=total_contrato,
        valor_acumulado=valor_acumulado,
        percentual_executado=calcular_percentual(valor_acumulado, total_contrato),
        marcos=marcos,
    )


def calcular_de_dados(dados: DadosMedicao) -> ResultadoFinanceiro:
    """Atalho para o snapshot no formato dos adapters."""
    return calcular_financeiro_medicao(
        dados.get("orcamento", []),
        dados.get("aditivos", []),
        dados.get("sessoes", []),
        dados.get("itens_medicao", []),
        dados.get("obra_valor_total", 0.0),
        dados.get("obra_valor_aditivado", 0.0),
    )


def detalhar_itens(orcamento: Rows, itens_medicao: Rows) -> List[ItemAcumulado]:
    """
    Acumulado por item (todas as medições), para o relatório de medição.

    Ordem: folhas com valor contratado (ordem do orçamento), depois os
    códigos extracontratuais na ordem em que aparecem nas medições.
    A soma de `valor_acumulado` é o valor acumulado global.
    """
    dados = normalizar_dados(orcamento, [], [], itens_medicao)
    total_por_item = build_total_contrato_por_item(dados["orcamento"])
    brutos = agrupar_totais_por_item(dados["itens_medicao"])
    com_teto = aplicar_teto(brutos, total_por_item)

    codigos: List[str] = list(total_por_item)
    codigos += [c for c in brutos if c not in total_por_item]

    out: List[ItemAcumulado] = []
    for code in codigos:
        contratado = total_por_item.get(code, 0.0)
        bruto = brutos.get(code, 0.0)
        acumulado = com_teto.get(code, 0.0)
        out.append(ItemAcumulado(
            item_code=code,
            total_contrato=contratado,
            valor_bruto=bruto,
            valor_acumulado=acumulado,
            excedente=round2(bruto - acumulado),
            saldo=round2(contratado - acumulado) if contratado > 0 else 0.0,
            percentual_item=calcular_percentual(acumulado, contratado),
            extracontratual=contratado <= 0,
        ))
    return out
