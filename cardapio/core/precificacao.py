"""
Cálculo do preço de um produto com as variações escolhidas.

`selecoes` mapeia o id da opção para a lista de ids de variações escolhidas.
Ids desconhecidos são ignorados.
"""
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping

from cardapio.core.entities import OpcaoProduto
from cardapio.core.exceptions import DadosInvalidosError, SelecaoInvalidaError

Selecoes = Mapping[str, Iterable[str]]


def _indexar(opcoes: Iterable[OpcaoProduto]) -> Dict[str, OpcaoProduto]:
    return {str(opcao.id): opcao for opcao in opcoes}


def calcular_preco_total(
    selecoes: Selecoes,
    opcoes: Iterable[OpcaoProduto],
    preco_base: Decimal,
    quantidade: int,
) -> Decimal:
    """total = quantidade * (preço base + soma dos acréscimos escolhidos)."""
    catalogo = _indexar(opcoes)
    total = Decimal(preco_base)

    for opcao_id, variacao_ids in selecoes.items():
        opcao = catalogo.get(str(opcao_id))
        if not opcao:
            continue
        for variacao_id in variacao_ids:
            variacao = opcao.buscar_variacao(variacao_id)
            if variacao:
                total += variacao.preco

    return total * quantidade


def calcular_preco_unitario(
    selecoes: Selecoes,
    opcoes: Iterable[OpcaoProduto],
    preco_base: Decimal,
    quantidade: int,
) -> Decimal:
    if quantidade < 1:
        raise DadosInvalidosError("A quantidade deve ser pelo menos 1.")
    return calcular_preco_total(selecoes, opcoes, preco_base, quantidade) / quantidade


def nomes_selecionados(selecoes: Selecoes, opcoes: Iterable[OpcaoProduto]) -> Dict[str, List[str]]:
    """Troca ids por nomes legíveis: {titulo da opção: [nomes das variações]}."""
    catalogo = _indexar(opcoes)
    resultado = {}
    for opcao_id, variacao_ids in selecoes.items():
        opcao = catalogo.get(str(opcao_id))
        if not opcao:
            continue
        nomes = []
        for variacao_id in variacao_ids:
            variacao = opcao.buscar_variacao(variacao_id)
            if variacao:
                nomes.append(variacao.nome)
        resultado[opcao.titulo] = nomes
    return resultado


def validar_selecoes(selecoes: Selecoes, opcoes: Iterable[OpcaoProduto]) -> None:
    """Opções obrigatórias precisam de escolha; nenhuma pode passar do limite."""
    for opcao in opcoes:
        escolhidas = [
            v for v in selecoes.get(str(opcao.id), [])
            if opcao.buscar_variacao(v)
        ]
        if opcao.obrigatoria and not escolhidas:
            raise SelecaoInvalidaError(
                opcao.titulo, f"Escolha uma opção em '{opcao.titulo}'."
            )
        if len(escolhidas) > opcao.limite_selecoes:
            raise SelecaoInvalidaError(
                opcao.titulo,
                f"Escolha até {opcao.limite_selecoes} opção(ões) em '{opcao.titulo}'.",
            )
