# src/medicao_financeiro/normalizar.py
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from .models import (
    OrcamentoItem,
    AditivoItem,
    MedicaoSession,
    MedicaoItem,
    DadosMedicao,
)
from .utils.utils_num import to_num
from .utils.utils_code import norm_code, norm_id

logger = logging.getLogger(__name__)


class EntradaInvalidaError(ValueError):
    """Campo numérico inválido em um dos registros de entrada."""

    def __init__(
        self,
        colecao: str,
        indice: Optional[int],
        campo: str,
        valor: object,
        motivo: str = "valor não numérico",
    ):
        self.colecao = colecao
        self.indice = indice
        self.campo = campo
        self.valor = valor
        onde = f"{colecao}[{indice}]" if indice is not None else colecao
        super().__init__(f"{onde}.{campo}: {motivo} {valor!r}")


def _num(row: Mapping[str, Any], campo: str, colecao: str, i: Optional[int]) -> float:
    try:
        return to_num(row.get(campo))
    except ValueError as e:
        raise EntradaInvalidaError(colecao, i, campo, row.get(campo)) from e


def normalizar_orcamento(rows: Iterable[Mapping[str, Any]]) -> List[OrcamentoItem]:
    out: List[OrcamentoItem] = []
    for i, r in enumerate(rows):
        item: OrcamentoItem = {
            "item": norm_code(r.get("item")),
            "total_contrato": _num(r, "total_contrato", "orcamento", i),
        }
        origem = r.get("origem")
        if origem:
            item["origem"] = str(origem).strip()
        out.append(item)
    return out


def normalizar_aditivos(rows: Iterable[Mapping[str, Any]]) -> List[AditivoItem]:
    return [
        AditivoItem(total=_num(r, "total", "aditivos", i))
        for i, r in enumerate(rows)
    ]


def normalizar_sessoes(rows: Iterable[Mapping[str, Any]]) -> List[MedicaoSession]:
    out: List[MedicaoSession] = []
    for i, r in enumerate(rows):
        seq = _num(r, "sequencia", "sessoes", i)
        if not seq.is_integer():
            # 1.9 viraria 1 e trocaria a ordem dos marcos
            raise EntradaInvalidaError("sessoes", i, "sequencia", r.get("sequencia"), "sequência não inteira")
        out.append(MedicaoSession(id=norm_id(r.get("id")), sequencia=int(seq)))
    return out


def normalizar_itens_medicao(rows: Iterable[Mapping[str, Any]]) -> List[MedicaoItem]:
    return [
        MedicaoItem(
            item_code=norm_code(r.get("item_code")),
            pct=_num(r, "pct", "itens_medicao", i),
            total=_num(r, "total", "itens_medicao", i),
            medicao_id=norm_id(r.get("medicao_id")),
        )
        for i, r in enumerate(rows)
    ]


def normalizar_dados(
    orcamento: Iterable[Mapping[str, Any]],
    aditivos: Iterable[Mapping[str, Any]],
    sessoes: Iterable[Mapping[str, Any]],
    itens_medicao: Iterable[Mapping[str, Any]],
    obra_valor_total: object = 0.0,
    obra_valor_aditivado: object = 0.0,
) -> DadosMedicao:
    """
    Passo único de validação na fronteira do cálculo.

    Depois daqui nenhum módulo de cálculo precisa tratar None/strings:
    campos numéricos ausentes viram 0.0, códigos viram str sem espaços nas pontas.
    """
    obra = {"obra_valor_total": obra_valor_total, "obra_valor_aditivado": obra_valor_aditivado}
    dados = DadosMedicao(
        orcamento=normalizar_orcamento(orcamento or []),
        aditivos=normalizar_aditivos(aditivos or []),
        sessoes=normalizar_sessoes(sessoes or []),
        itens_medicao=normalizar_itens_medicao(itens_medicao or []),
        obra_valor_total=_num(obra, "obra_valor_total", "obra", None),
        obra_valor_aditivado=_num(obra, "obra_valor_aditivado", "obra", None),
    )
    logger.debug(
        "Entrada normalizada: %d item(ns) de orçamento, %d de aditivo, %d medição(ões), %d linha(s) medida(s).",
        len(dados["orcamento"]), len(dados["aditivos"]), len(dados["sessoes"]), len(dados["itens_medicao"]),
    )
    return dados
