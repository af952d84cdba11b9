# src/medicao_financeiro/utils/utils_num.py
from __future__ import annotations

import math
import re
import pandas as pd

# "1.500" | "1.234.567"  (milhar pt-BR, sem decimais)
_PT_MILHAR = re.compile(r"-?\d{1,3}(?:\.\d{3})+")
# "1.234,56" | "12,5"
_PT_DECIMAL = re.compile(r"-?(?:\d{1,3}(?:\.\d{3})+|\d+),\d+")


def round2(x: float) -> float:
    """
    Arredonda para centavos no modo comercial (meio para cima):
    escala por 100, arredonda o inteiro e volta.

      round2(0.125)  -> 0.13   (round(0.125, 2) daria 0.12)
      round2(-0.125) -> -0.12
    """
    return math.floor(x * 100 + 0.5) / 100


def to_num(x: object) -> float:
    """
    Converte um campo numérico vindo do banco/planilha:
      None, "", NaN -> 0.0
      "1500.5"      -> 1500.5
      "1.500"       -> 1500.0   (milhar pt-BR, não 1.5)
      "1.234,56"    -> 1234.56  (formato pt-BR)
    Levanta ValueError para qualquer outra coisa (ex.: "1,500.50").
    """
    if x is None:
        return 0.0
    if isinstance(x, bool):
        raise ValueError(f"valor booleano não é numérico: {x!r}")
    if isinstance(x, (int, float)):
        f = float(x)
        return 0.0 if pd.isna(f) else f

    s = str(x).strip()
    if s == "" or s.lower() in ("nan", "none", "null"):
        return 0.0
    # pt-BR antes do float(): float("1.500") aceitaria e daria 1.5
    if _PT_MILHAR.fullmatch(s):
        return float(s.replace(".", ""))
    if _PT_DECIMAL.fullmatch(s):
        return float(s.replace(".", "").replace(",", "."))
    try:
        return float(s)
    except ValueError:
        raise ValueError(f"valor não numérico: {x!r}") from None
