# src/medicao_financeiro/utils/utils_code.py
from __future__ import annotations

import math
import re

_ESPACOS = re.compile(r"\s+")


def _vazio(x: object) -> bool:
    return x is None or (isinstance(x, float) and math.isnan(x))


def norm_code(x: object) -> str:
    """
    Código hierárquico de item ("1.2.3") na forma usada como chave:
      " 1.2 "   -> "1.2"
      "1 . 2"   -> "1.2"    (espaços internos de digitação)
      "1.2."    -> "1.2"    (ponto final solto quebraria o teste de folha)
      "01.02"   -> "01.02"  (zeros à esquerda são mantidos: "01.02" != "1.2")
      None/NaN  -> ""
    """
    if _vazio(x):
        return ""
    s = _ESPACOS.sub("", str(x))
    return s.rstrip(".")


def norm_id(x: object) -> str:
    """Id de medição: só texto sem espaços nas pontas (ids numéricos viram str)."""
    if _vazio(x):
        return ""
    return str(x).strip()
