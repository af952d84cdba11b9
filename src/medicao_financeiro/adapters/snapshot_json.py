# src/medicao_financeiro/adapters/snapshot_json.py
from __future__ import annotations

import json
import logging
from pathlib import Path

from ..models import DadosMedicao

logger = logging.getLogger(__name__)

_LISTAS = ("orcamento", "aditivos", "sessoes", "itens_medicao")


def load_dados_json(path: str | Path) -> DadosMedicao:
    """
    Lê um snapshot de obra em JSON:
    {
      "orcamento":     [{"item": "1.1", "total_contrato": 1000.0, "origem": "..."}],
      "aditivos":      [{"total": 250.0}],
      "sessoes":       [{"id": "m1", "sequencia": 1}],
      "itens_medicao": [{"item_code": "1.1", "pct": 50, "total": 500, "medicao_id": "m1"}],
      "obra_valor_total": 0,
      "obra_valor_aditivado": 0
    }
    Listas ausentes viram [], valores ausentes viram 0 (a conversão numérica
    fica com o normalizador).
    """
    p = Path(path)
    with open(p, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"{p}: esperado um objeto JSON na raiz, veio {type(raw).__name__}.")

    for chave in _LISTAS:
        if chave not in raw:
            logger.warning(f"{p.name}: chave {chave!r} ausente; considerando lista vazia.")
        elif not isinstance(raw[chave], list):
            raise ValueError(f"{p}: {chave!r} deve ser uma lista.")

    return DadosMedicao(
        orcamento=raw.get("orcamento") or [],
        aditivos=raw.get("aditivos") or [],
        sessoes=raw.get("sessoes") or [],
        itens_medicao=raw.get("itens_medicao") or [],
        obra_valor_total=raw.get("obra_valor_total") or 0.0,
        obra_valor_aditivado=raw.get("obra_valor_aditivado") or 0.0,
    )
