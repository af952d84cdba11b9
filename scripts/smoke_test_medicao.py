#!/usr/bin/env python3
import sys, logging, traceback
from pathlib import Path

# permitir "python scripts/..." sem instalar o pacote
sys.path.append("src")

from medicao_financeiro.adapters.snapshot_json import load_dados_json
from medicao_financeiro.processor import calcular_de_dados, detalhar_itens

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

def main():
    # ajuste o caminho se necessário
    dados_path = Path(sys.argv[1] if len(sys.argv) > 1 else "data/obra_snapshot.json")

    if not dados_path.exists():
        print(f"[ERRO] Arquivo não encontrado: {dados_path}")
        sys.exit(1)

    print("== Testando financeiro de medições ==")
    print(f"Arquivo: {dados_path}")

    try:
        dados = load_dados_json(dados_path)
        res = calcular_de_dados(dados)
    except Exception:
        print("\n[ERRO] Falha no cálculo:\n")
        traceback.print_exc()
        sys.exit(2)

    print(f"\nTotal contrato: {res['total_contrato']:.2f} "
          f"(orçamento={res['total_contrato_orcamento']:.2f} | aditivo={res['total_aditivo']:.2f})")
    print(f"Acumulado: {res['valor_acumulado']:.2f} | executado={res['percentual_executado']:.2f}%")

    for m in res["marcos"]:
        print(f"- {m['sequencia']}ª: medição={m['valor_medicao']:.2f} | "
              f"acumulado={m['valor_acumulado']:.2f} | {m['percentual_acumulado']:.2f}%")

    # Conferências rápidas dos invariantes
    anterior = 0.0
    for m in res["marcos"]:
        if abs(anterior + m["valor_medicao"] - m["valor_acumulado"]) > 0.01:
            print(f"[AVISO] marco {m['sequencia']} não fecha com o anterior.")
        anterior = m["valor_acumulado"]

    acima = [it for it in detalhar_itens(dados["orcamento"], dados["itens_medicao"]) if it["excedente"] > 0]
    if acima:
        print(f"\n[AVISO] {len(acima)} item(ns) medidos acima do contratado (teto aplicado).")

    print("\nOK ✅")

if __name__ == "__main__":
    main()
