# src/cli.py
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn
import typer

# permite "python src/cli.py" rodar sem instalar o pacote
sys.path.append(str(Path(__file__).resolve().parent))

from medicao_financeiro.adapters.snapshot_json import load_dados_json
from medicao_financeiro.adapters.snapshot_excel import load_dados_excel
from medicao_financeiro.exporters.json_resultado import export_resultado_json, export_divergencias_json
from medicao_financeiro.exporters.excel import export_resultado_excel
from medicao_financeiro.indice import build_total_contrato_por_item
from medicao_financeiro.models import DadosMedicao
from medicao_financeiro.normalizar import EntradaInvalidaError, normalizar_dados
from medicao_financeiro.processor import calcular_de_dados, detalhar_itens
from medicao_financeiro.validators.consistencia import verificar_consistencia

app = typer.Typer(no_args_is_help=True, add_completion=False, help="""
Financeiro de medições de obra: total do contrato, acumulado, percentual e marcos.
""")


# -----------------------------------------
# Helpers
# -----------------------------------------
def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def _load(dados: Path) -> DadosMedicao:
    """Escolhe o adapter pela extensão do arquivo; falha de leitura encerra com código 1."""
    ext = dados.suffix.lower()
    if ext not in (".json", ".xlsx", ".xlsm", ".xls"):
        raise typer.BadParameter(f"Extensão não suportada: {ext!r}. Use .json ou .xlsx.")
    try:
        if ext == ".json":
            return load_dados_json(dados)
        return load_dados_excel(dados)
    except (FileNotFoundError, KeyError, ValueError, RuntimeError) as e:
        # KeyError guarda a mensagem entre aspas
        msg = e.args[0] if isinstance(e, KeyError) and e.args else e
        _abort(f"[ERRO] Falha ao ler {dados.name}: {msg}")


def _fmt_brl(valor: float) -> str:
    # 1234567.8 -> "R$ 1.234.567,80"
    s = f"{valor:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"R$ {s}"


def _abort(msg: str) -> NoReturn:
    typer.secho(msg, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


# =====================================================================
# CÁLCULO
# =====================================================================

@app.command("calcular")
def calcular(
    dados: Path = typer.Option(..., exists=True, readable=True, help="Snapshot da obra (.json ou .xlsx)."),
    out: Path = typer.Option(Path("output/financeiro_medicao.json"), help="Saída (.json ou .xlsx)."),
    formato: str = typer.Option("", help="Formato da saída: json ou xlsx (padrão: pela extensão de --out)."),
    com_itens: bool = typer.Option(False, "--com-itens", help="Inclui o acumulado por item na saída."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log detalhado."),
):
    """
    Calcula total do contrato, valor acumulado, percentual executado e marcos.
    """
    formato_norm = formato.strip().lower() or ("xlsx" if out.suffix.lower() == ".xlsx" else "json")
    if formato_norm not in ("json", "xlsx"):
        raise typer.BadParameter("formato não suportado. Use: json, xlsx")
    if formato_norm == "xlsx" and out.suffix.lower() != ".xlsx":
        # o writer do pandas exige a extensão do formato
        out = out.with_suffix(".xlsx")

    _setup_logging(verbose)

    typer.secho(f">> Lendo snapshot: {dados.name}…", fg=typer.colors.CYAN)
    snap = _load(dados)

    typer.secho(">> Calculando financeiro…", fg=typer.colors.CYAN)
    try:
        resultado = calcular_de_dados(snap)
        itens = detalhar_itens(snap["orcamento"], snap["itens_medicao"]) if com_itens else None
    except EntradaInvalidaError as e:
        _abort(f"[ERRO] Entrada inválida: {e}")

    if formato_norm == "xlsx":
        export_resultado_excel(resultado, out, itens=itens)
    else:
        export_resultado_json(resultado, out, itens=itens, meta={"dados": str(dados)})

    typer.echo(f"   Total do contrato: {_fmt_brl(resultado['total_contrato'])}")
    typer.echo(f"   Valor acumulado:   {_fmt_brl(resultado['valor_acumulado'])}")
    typer.echo(f"   Executado:         {resultado['percentual_executado']:.2f}%")
    for m in resultado["marcos"]:
        typer.echo(
            f"   {m['sequencia']}ª medição: {_fmt_brl(m['valor_medicao'])} "
            f"(acumulado {_fmt_brl(m['valor_acumulado'])} | {m['percentual_acumulado']:.1f}%)"
        )
    typer.secho(f">> OK! Resultado salvo em {out}", fg=typer.colors.GREEN)


@app.command("detalhar")
def detalhar(
    dados: Path = typer.Option(..., exists=True, readable=True, help="Snapshot da obra (.json ou .xlsx)."),
    apenas_excedentes: bool = typer.Option(False, "--apenas-excedentes", help="Mostra só itens medidos acima do contratado."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log detalhado."),
):
    """
    Lista o acumulado por item (contratado, medido, teto aplicado, saldo).
    """
    _setup_logging(verbose)
    snap = _load(dados)
    try:
        itens = detalhar_itens(snap["orcamento"], snap["itens_medicao"])
    except EntradaInvalidaError as e:
        _abort(f"[ERRO] Entrada inválida: {e}")

    if apenas_excedentes:
        itens = [it for it in itens if it["excedente"] > 0]

    for it in itens:
        tag = " [EXTRA]" if it["extracontratual"] else ""
        typer.echo(
            f"{it['item_code']}{tag} | contratado={_fmt_brl(it['total_contrato'])} "
            f"| acumulado={_fmt_brl(it['valor_acumulado'])} | saldo={_fmt_brl(it['saldo'])} "
            f"| {it['percentual_item']:.1f}%"
        )
        if it["excedente"] > 0:
            typer.secho(f"    excedente não faturado: {_fmt_brl(it['excedente'])}", fg=typer.colors.YELLOW)
    typer.secho(f">> {len(itens)} item(ns).", fg=typer.colors.GREEN)


@app.command("verificar")
def verificar(
    dados: Path = typer.Option(..., exists=True, readable=True, help="Snapshot da obra (.json ou .xlsx)."),
    tol_abs: float = typer.Option(0.01, help="Tolerância absoluta em reais."),
    out: Path = typer.Option(Path("output/diverg_medicao.json"), help="JSON de saída."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log detalhado."),
):
    """
    Confere se o `total` gravado em cada linha bate com pct × valor contratado.
    """
    _setup_logging(verbose)
    snap = _load(dados)
    try:
        norm = normalizar_dados(snap["orcamento"], [], [], snap["itens_medicao"])
    except EntradaInvalidaError as e:
        _abort(f"[ERRO] Entrada inválida: {e}")

    total_por_item = build_total_contrato_por_item(norm["orcamento"])
    diverg = verificar_consistencia(norm["itens_medicao"], total_por_item, tol_abs=tol_abs)

    export_divergencias_json(diverg, out, meta={"dados": str(dados), "tol_abs": tol_abs})

    color = typer.colors.YELLOW if diverg else typer.colors.GREEN
    typer.secho(f">> Divergências: {len(diverg)} | JSON salvo em {out}", fg=color)
    if diverg:
        raise typer.Exit(code=2)


if __name__ == "__main__":
    app(prog_name="cli.py")
