# cardapio/core/ports.py
"""
Definição das Portas (Interfaces/Protocolos) da Arquitetura Limpa.

Estes protocolos definem o contrato que a camada de Infraestrutura (Repositorios)
e a camada de Apresentação (armazenamento do carrinho) DEVEM seguir para se
conectar à camada Core (Casos de Uso).
"""

from typing import Protocol, List, Optional
from abc import abstractmethod

from cardapio.core.entities import (
    Carrinho, Categoria, Endereco, InfoLoja, ItemCarrinho, OpcaoProduto, Pedido, Perfil, Produto,
    StatusPedido,
)


# ====================================================================
# 1. REPOSITÓRIOS (Portas de Persistência)
# ====================================================================

class IProdutoRepository(Protocol):
    """Protocolo para a busca de Produtos e suas opções."""

    @abstractmethod
    def buscar_por_id(self, produto_id: str) -> Optional[Produto]: ...

    @abstractmethod
    def buscar_por_criterios(
        self,
        busca: Optional[str] = None,
        categoria_id: Optional[int] = None,
        apenas_disponiveis: bool = True,
    ) -> List[Produto]: ...

    @abstractmethod
    def buscar_opcoes(self, produto_id: str) -> List[OpcaoProduto]: ...


class ICategoriaRepository(Protocol):
    """Protocolo para a busca de Categorias."""

    @abstractmethod
    def buscar_todas(self) -> List[Categoria]: ...


class IPedidoRepository(Protocol):
    """Protocolo para a persistência e gestão de Pedidos."""

    @abstractmethod
    def criar_pedido(
        self,
        usuario_id: Optional[str],
        itens: List[dict],
        endereco: Endereco,
        total,
        status: StatusPedido,
        nome_cliente: Optional[str] = None,
    ) -> Pedido: ...

    @abstractmethod
    def buscar_por_id(self, pedido_id: str) -> Optional[Pedido]: ...

    @abstractmethod
    def listar_todos_pedidos(self, status: Optional[str] = None, busca: Optional[str] = None) -> List[Pedido]: ...

    @abstractmethod
    def listar_pedidos_por_usuario(self, usuario_id: str) -> List[Pedido]: ...

    @abstractmethod
    def atualizar_status(self, pedido_id: str, novo_status: StatusPedido) -> Optional[Pedido]: ...


class IPerfilRepository(Protocol):
    """Protocolo para a busca de Perfis (tabela profiles)."""

    @abstractmethod
    def buscar_por_id(self, usuario_id: str) -> Optional[Perfil]: ...


# ====================================================================
# 2. ESTADO DO CLIENTE
# ====================================================================

class ICarrinhoStore(Protocol):
    """Protocolo para o armazenamento do carrinho (sessão, memória)."""

    @abstractmethod
    def get_carrinho(self) -> Carrinho: ...

    @abstractmethod
    def add_item(self, item: ItemCarrinho) -> Carrinho: ...

    @abstractmethod
    def remove_item(self, item_id: str) -> Carrinho: ...

    @abstractmethod
    def update_quantity(self, item_id: str, quantidade: int) -> Carrinho: ...

    @abstractmethod
    def clear_carrinho(self) -> None: ...


class IInfoLojaProvider(Protocol):
    """Protocolo para os metadados da loja."""

    @abstractmethod
    def obter(self) -> InfoLoja: ...
