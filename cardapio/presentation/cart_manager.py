# cardapio/presentation/cart_manager.py
# Gerencia a persistência e manipulação do Carrinho de Compras na sessão do Django.

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from django.http import HttpRequest

from cardapio.core.entities import IMAGEM_PADRAO, Carrinho, ItemCarrinho
from cardapio.core.ports import ICarrinhoStore

logger = logging.getLogger(__name__)


class CartManager(ICarrinhoStore):
    """
    Armazena o carrinho na sessão do Django. Cada item é gravado no mesmo
    formato (camelCase) usado no campo items do pedido, já com o preço das
    variações aplicado, de modo que o checkout apenas copia a lista.
    """

    SESSION_KEY = 'carrinho_cardapio'

    def __init__(self, request: HttpRequest):
        """Inicializa o CartManager e carrega o carrinho da sessão."""
        self.request = request
        self.carrinho: Carrinho = self._load_carrinho_from_session()

    # --- Métodos de Persistência ---

    @staticmethod
    def _item_from_dict(dados: Dict[str, Any]) -> Optional[ItemCarrinho]:
        try:
            return ItemCarrinho(
                id=dados['id'],
                produto_id=dados['productId'],
                nome=dados.get('name', ''),
                preco=Decimal(dados['price']),
                quantidade=int(dados['quantity']),
                imagem=dados.get('image') or IMAGEM_PADRAO,
                opcoes_selecionadas=dados.get('selectedOptions') or {},
                preco_total=Decimal(dados['totalPrice']),
            )
        except (KeyError, TypeError, ValueError, InvalidOperation):
            logger.warning("Item inválido descartado do carrinho da sessão: %r", dados)
            return None

    def _load_carrinho_from_session(self) -> Carrinho:
        """
        Carrega o Carrinho da sessão do Django.
        Se não existir, cria um novo objeto Carrinho vazio.
        """
        raw_cart = self.request.session.get(self.SESSION_KEY) or []
        if not isinstance(raw_cart, list):
            logger.warning("Carrinho da sessão em formato inesperado descartado: %r", raw_cart)
            raw_cart = []
        itens = [self._item_from_dict(dados) for dados in raw_cart if isinstance(dados, dict)]
        return Carrinho(itens=[item for item in itens if item])

    def _save_carrinho_to_session(self):
        self.request.session[self.SESSION_KEY] = [item.to_dict() for item in self.carrinho.itens]
        self.request.session.modified = True

    def clear_carrinho(self) -> None:
        """Limpa o carrinho na sessão (usado após o checkout)."""
        if self.SESSION_KEY in self.request.session:
            del self.request.session[self.SESSION_KEY]
            self.request.session.modified = True
        self.carrinho = Carrinho()

    # --- Métodos de Manipulação ---

    def add_item(self, item: ItemCarrinho) -> Carrinho:
        """Cada adição é uma linha nova, mesmo para o mesmo produto."""
        self.carrinho.itens.append(item)
        self._save_carrinho_to_session()
        return self.carrinho

    def remove_item(self, item_id: str) -> Carrinho:
        """Remove completamente um item do carrinho."""
        self.carrinho.itens = [item for item in self.carrinho.itens if item.id != item_id]
        self._save_carrinho_to_session()
        return self.carrinho

    def update_quantity(self, item_id: str, quantidade: int) -> Carrinho:
        """Atualiza a quantidade mantendo o preço unitário com as variações."""
        if quantidade <= 0:
            return self.remove_item(item_id)

        item = self.carrinho.get_item(item_id)
        if item:
            item.quantidade = quantidade
            item.preco_total = item.preco * quantidade
            self._save_carrinho_to_session()
        return self.carrinho

    # --- Métodos de Consulta ---

    def get_carrinho(self) -> Carrinho:
        return self.carrinho

    def get_total_items(self) -> int:
        """Retorna a contagem total de unidades no carrinho."""
        return self.carrinho.quantidade_total

    def is_empty(self) -> bool:
        return self.carrinho.is_empty()
