# src/medicao_financeiro/exporters/json_resultado.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional
import json

from ..models import ResultadoFinanceiro, ItemAcumulado, DivergenciaMedicao


def export_resultado_json(
    resultado: ResultadoFinanceiro,
    path: str | Path,
    *,
    itens: Optional[List[ItemAcumulado]] = None,
    indent: int = 2,
    ensure_ascii: bool = False,
    meta: Optional[Dict[str, Any]] = None,
) -> Path:
    """
    Salva o resultado financeiro em JSON.

    Formato:
    {
      "resultado": { totais..., "marcos": [...] },
      "itens": [ ... ],             # opcional (detalhamento por item)
      "meta": { ... }               # opcional
    }
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)

    payload: Dict[str, Any] = {"resultado": resultado}
    if itens is not None:
        payload["itens"] = itens
    if meta:
        payload["meta"] = meta

    with open(out, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=ensure_ascii, indent=indent)

    return out


def export_divergencias_json(
    divergencias: List[DivergenciaMedicao],
    path: str | Path,
    *,
    indent: int = 2,
    ensure_ascii: bool = False,
    meta: Optional[Dict[str, Any]] = None,
) -> Path:
    """
    Salva as divergências de `total` x pct:
    {
      "total_divergencias": <int>,
      "divergencias": [ ... ],
      "meta": { ... }               # opcional
    }
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)

    payload: Dict[str, Any] = {
        "total_divergencias": len(divergencias),
        "divergencias": divergencias,
    }
    if meta:
        payload["meta"] = meta

    with open(out, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=ensure_ascii, indent=indent)

    return out
