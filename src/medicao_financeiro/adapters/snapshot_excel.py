# src/medicao_financeiro/adapters/snapshot_excel.py
from __future__ import annotations

import logging
import re
import unicodedata
from pathlib import Path
from typing import Any, Dict, Iterable, List

import pandas as pd

from ..models import DadosMedicao

logger = logging.getLogger(__name__)

# ---------- Abas e colunas esperadas ----------

_SHEET_CANDIDATES = {
    "orcamento":     ("orcamento", "planilha", "itens orcamento"),
    "aditivos":      ("aditivos", "aditivo", "itens aditivo"),
    "sessoes":       ("sessoes", "medicoes", "sessoes medicao"),
    "itens_medicao": ("itens medicao", "medicao itens", "itens medidos"),
    "obra":          ("obra", "contrato"),
}

_COL_CANDIDATES = {
    "orcamento": {
        "item":           ("item", "codigo", "cod"),
        "total_contrato": ("total contrato", "valor contrato", "total"),
        "origem":         ("origem",),
    },
    "aditivos": {
        "total": ("total", "valor"),
    },
    "sessoes": {
        "id":        ("id", "medicao id"),
        "sequencia": ("sequencia", "seq", "numero"),
    },
    "itens_medicao": {
        "item_code":  ("item code", "item", "codigo"),
        "pct":        ("pct", "percentual"),
        "total":      ("total", "valor"),
        "medicao_id": ("medicao id", "medicao", "sessao"),
    },
    "obra": {
        "obra_valor_total":     ("obra valor total", "valor total"),
        "obra_valor_aditivado": ("obra valor aditivado", "valor aditivado"),
    },
}

_OPTIONAL_COLS = {"origem", "pct"}

_NAO_ALNUM = re.compile(r"[^a-z0-9]+")


def _norm_nome(s: str) -> str:
    """Nome de aba/coluna para comparação: "Itens_Medição" -> "itens medicao"."""
    s = unicodedata.normalize("NFKD", str(s))
    s = "".join(ch for ch in s if not unicodedata.combining(ch)).casefold()
    return _NAO_ALNUM.sub(" ", s).strip()


def _build_lookup(names: Iterable[str]) -> dict[str, str]:
    return {_norm_nome(n): n for n in map(str, names)}


def _pick(lookup: dict[str, str], candidates: Iterable[str], required: bool = True) -> str | None:
    """Match exato primeiro; depois por prefixo (ex.: 'total contrato r$')."""
    for c in candidates:
        c_norm = _norm_nome(c)
        if c_norm in lookup:
            return lookup[c_norm]
    for c in candidates:
        c_norm = _norm_nome(c)
        for k in lookup:
            if c_norm and k.startswith(c_norm):
                return lookup[k]
    if required:
        raise KeyError(f"Não encontrei nenhuma coluna/aba compatível com: {tuple(candidates)}")
    return None


def _read_sheet(path: str, sheet: str, colecao: str) -> List[Dict[str, Any]]:
    # dtype=str: códigos "1.10" não podem virar float 1.1
    df = pd.read_excel(path, sheet_name=sheet, dtype=str)
    df = df.dropna(how="all")
    lookup = _build_lookup(df.columns)

    cols: Dict[str, str] = {}
    for canon, candidates in _COL_CANDIDATES[colecao].items():
        col = _pick(lookup, candidates, required=canon not in _OPTIONAL_COLS)
        if col is not None:
            cols[col] = canon

    proj = df[list(cols)].rename(columns=cols)
    # NaN -> None para o normalizador tratar como ausente
    proj = proj.astype(object).where(pd.notna(proj), None)
    logger.info(f"[{sheet}] {len(proj)} linha(s) lidas como {colecao!r}.")
    return proj.to_dict(orient="records")


# ---------- Loader principal ----------

def load_dados_excel(path: str | Path) -> DadosMedicao:
    """
    Lê um snapshot de obra salvo em Excel (uma aba por coleção).

    Abas reconhecidas (nome sem acento/caixa): orcamento, aditivos, sessoes,
    itens_medicao e, opcionalmente, obra (1ª linha: valores globais do contrato).
    Códigos de item devem estar como texto na planilha.
    """
    path = str(path)
    if not Path(path).exists():
        raise FileNotFoundError(f"Arquivo não encontrado: {path}")

    xls = pd.ExcelFile(path)
    sheets = _build_lookup(xls.sheet_names)

    found: Dict[str, str] = {}
    for colecao, candidates in _SHEET_CANDIDATES.items():
        sheet = _pick(sheets, candidates, required=False)
        if sheet is None:
            logger.warning(f"Aba de {colecao!r} não encontrada; considerando vazia.")
            continue
        found[colecao] = sheet

    if not found:
        raise RuntimeError("Nenhuma aba reconhecida (orcamento, aditivos, sessoes, itens_medicao, obra).")

    rows = {colecao: _read_sheet(path, sheet, colecao) for colecao, sheet in found.items()}

    obra = rows.get("obra") or [{}]
    return DadosMedicao(
        orcamento=rows.get("orcamento", []),
        aditivos=rows.get("aditivos", []),
        sessoes=rows.get("sessoes", []),
        itens_medicao=rows.get("itens_medicao", []),
        obra_valor_total=obra[0].get("obra_valor_total") or 0.0,
        obra_valor_aditivado=obra[0].get("obra_valor_aditivado") or 0.0,
    )
