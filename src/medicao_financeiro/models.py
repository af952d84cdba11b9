# src/medicao_financeiro/models.py
from __future__ import annotations

from typing import TypedDict, NotRequired, Dict, List, Optional


# =========================
# Entrada (snapshot vindo da camada de dados)
# =========================
class OrcamentoItem(TypedDict):
    """
    Linha da planilha orçamentária do contrato.
    O código é hierárquico ("1", "1.2", "1.2.3"); só itens folha têm valor faturável.
    """
    item: str
    total_contrato: float
    # Ex.: "contratual", "extracontratual" (informativo, não entra no cálculo)
    origem: NotRequired[str]


class AditivoItem(TypedDict):
    """Item de aditivo já bloqueado/aprovado (o filtro é feito por quem chama)."""
    total: float


class MedicaoSession(TypedDict):
    id: str
    # Define a ordem cronológica das medições
    sequencia: int


class MedicaoItem(TypedDict):
    """
    Linha de uma medição. Itens contratuais usam `pct`; extracontratuais usam `total`.
    """
    item_code: str
    pct: float
    total: float
    medicao_id: str


class DadosMedicao(TypedDict):
    """Snapshot completo de uma obra, no formato lido pelos adapters."""
    orcamento: List[OrcamentoItem]
    aditivos: List[AditivoItem]
    sessoes: List[MedicaoSession]
    itens_medicao: List[MedicaoItem]
    obra_valor_total: float
    obra_valor_aditivado: float


# =========================
# Saída
# =========================
class Marco(TypedDict):
    sequencia: int
    valor_medicao: float        # só esta medição
    valor_acumulado: float      # até esta medição (inclusive)
    percentual_acumulado: float


class TotaisContrato(TypedDict):
    total_contrato_orcamento: float
    total_aditivo: float
    total_contrato: float
    # True quando existe orçamento itemizado (soma das folhas > 0)
    tem_planilha: bool


class ResultadoFinanceiro(TypedDict):
    total_contrato_orcamento: float
    total_aditivo: float
    total_contrato: float
    valor_acumulado: float
    percentual_executado: float   # 0..100
    marcos: List[Marco]


class ItemAcumulado(TypedDict):
    """Resumo acumulado de um item (todas as medições)."""
    item_code: str
    total_contrato: float
    valor_bruto: float          # soma dos `total` sem teto
    valor_acumulado: float      # com teto no valor contratado
    excedente: float            # valor_bruto - valor_acumulado
    saldo: float                # total_contrato - valor_acumulado
    percentual_item: float
    extracontratual: bool


class DivergenciaMedicao(TypedDict):
    item_code: str
    medicao_id: str
    motivos: List[str]
    total_registrado: float
    total_calculado: float
    dif_abs: Optional[float]
    dir: str  # "MAIOR" | "MENOR" | ""


# Dicionários de acesso rápido
TotalContratoPorItem = Dict[str, float]   # código folha -> valor contratado (> 0)
TotaisPorItem        = Dict[str, float]   # código -> soma dos `total` medidos


__all__ = [
    "OrcamentoItem",
    "AditivoItem",
    "MedicaoSession",
    "MedicaoItem",
    "DadosMedicao",
    "Marco",
    "TotaisContrato",
    "ResultadoFinanceiro",
    "ItemAcumulado",
    "DivergenciaMedicao",
    "TotalContratoPorItem",
    "TotaisPorItem",
]
