# src/medicao_financeiro/exporters/excel.py
from __future__ import annotations

from pathlib import Path
from typing import Container, List, Optional
import pandas as pd

from ..models import ResultadoFinanceiro, ItemAcumulado

_COLS_MARCOS = ["sequencia", "valor_medicao", "valor_acumulado", "percentual_acumulado"]
_COLS_ITENS = [
    "item_code", "total_contrato", "valor_bruto", "valor_acumulado",
    "excedente", "saldo", "percentual_item", "extracontratual",
]
_COLS_MOEDA = {
    "valor", "valor_medicao", "valor_acumulado", "total_contrato",
    "valor_bruto", "excedente", "saldo",
}
_COLS_PCT = {"percentual_acumulado", "percentual_item"}


_LARGURA_MAX = 60


def _exibido(val: object, moeda: bool, pct: bool) -> str:
    # texto como o Excel mostra a célula, não o repr do float
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        if moeda:
            return f"{val:,.2f}"
        if pct:
            return f"{val:.2f}"
    return "" if val is None else str(val)


def _formatar_aba(ws, currency_fmt: str, percent_fmt: str, linhas_pct: Container[int] = ()) -> None:
    """
    Aplica formato de moeda/percentual por cabeçalho e ajusta a largura de cada
    coluna pelo texto já formatado. `linhas_pct` força percentual em linhas
    específicas (a coluna "valor" do resumo mistura reais e %).
    """
    from openpyxl.utils import get_column_letter

    headers = [c.value for c in ws[1]]
    larguras = [len(str(h or "")) for h in headers]
    for r in ws.iter_rows(min_row=2):
        for idx, cell in enumerate(r):
            hdr = headers[idx]
            pct = hdr in _COLS_PCT or (hdr in _COLS_MOEDA and cell.row in linhas_pct)
            moeda = hdr in _COLS_MOEDA and not pct
            if moeda:
                cell.number_format = currency_fmt
            elif pct:
                cell.number_format = percent_fmt
            larguras[idx] = max(larguras[idx], len(_exibido(cell.value, moeda, pct)))
    for idx, n in enumerate(larguras, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = min(n + 2, _LARGURA_MAX)


def export_resultado_excel(
    resultado: ResultadoFinanceiro,
    path: str | Path,
    *,
    itens: Optional[List[ItemAcumulado]] = None,
    number_format_currency: str = '#,##0.00',
    number_format_percent: str = '0.00',
) -> Path:
    """
    Gera um Excel com:
      - aba 'resumo' (indicador, valor)
      - aba 'marcos' (uma linha por medição)
      - aba 'itens' (acumulado por item), se `itens` for informado

    Percentuais ficam na escala 0..100 (não fração), como no resultado.
    Retorna o Path do arquivo gerado.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    df_resumo = pd.DataFrame(
        [
            ("total_contrato_orcamento", resultado["total_contrato_orcamento"]),
            ("total_aditivo", resultado["total_aditivo"]),
            ("total_contrato", resultado["total_contrato"]),
            ("valor_acumulado", resultado["valor_acumulado"]),
            ("percentual_executado", resultado["percentual_executado"]),
        ],
        columns=["indicador", "valor"],
    )
    df_marcos = pd.DataFrame(resultado["marcos"], columns=_COLS_MARCOS)

    with pd.ExcelWriter(path, engine="openpyxl") as xlw:
        df_resumo.to_excel(xlw, sheet_name="resumo", index=False)
        df_marcos.to_excel(xlw, sheet_name="marcos", index=False)
        if itens is not None:
            pd.DataFrame(itens, columns=_COLS_ITENS).to_excel(xlw, sheet_name="itens", index=False)

        wb = xlw.book
        # percentual_executado está na coluna "valor" do resumo
        linha_pct = 2 + list(df_resumo["indicador"]).index("percentual_executado")
        _formatar_aba(wb["resumo"], number_format_currency, number_format_percent, {linha_pct})
        for name in wb.sheetnames[1:]:
            _formatar_aba(wb[name], number_format_currency, number_format_percent)

    return path
