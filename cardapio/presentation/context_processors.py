"""
Context processors para a aplicação presentation.
"""
from cardapio.infrastructure.instances import info_loja

from .cart_manager import CartManager


def loja_context(request):
    """Metadados da loja (nome, telefone, endereço, taxa) em todas as telas."""
    return {'loja': info_loja.obter()}


def carrinho_context(request):
    """
    Adiciona informações do carrinho da sessão ao contexto global dos templates.
    Itens corrompidos na sessão são descartados pelo CartManager.
    """
    cart = CartManager(request)
    carrinho = cart.get_carrinho()
    return {
        'carrinho_total': carrinho.total,
        'quantidade_itens': cart.get_total_items(),
    }
