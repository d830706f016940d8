"""
Mapeadores (Mappers) para converter entre:
1. Modelos do Django ORM
2. Linhas no formato do backend (chaves em inglês, como nas colunas)
3. Entidades de Domínio (cardapio.core.entities)

Toda conversão de pedido e produto passa pelo normalizador do Core, de modo
que um registro vindo do ORM e um registro vindo de texto JSON legado
resultem na mesma Entidade.
"""
from typing import Any, Dict, List, Optional

from cardapio.core import normalizacao
from cardapio.core.entities import (
    Categoria as CategoriaEntity,
    OpcaoProduto as OpcaoProdutoEntity,
    Pedido as PedidoEntity,
    Perfil as PerfilEntity,
    Produto as ProdutoEntity,
)


# ====================================================================
# MAPERS DO CARDÁPIO
# ====================================================================

class CategoriaMapper:
    """Mapeador para Categoria."""

    @staticmethod
    def to_entity(model: Any) -> Optional[CategoriaEntity]:
        if not model: return None
        return CategoriaEntity(id=model.id, nome=model.nome, ordem=model.ordem)


class ProdutoMapper:
    """Mapeador para Produto."""

    @staticmethod
    def to_row(model: Any) -> Dict[str, Any]:
        """Linha da tabela products, com o nome da categoria embutido."""
        return {
            'id': model.id,
            'name': model.nome,
            'description': model.descricao,
            'price': model.preco,
            'image_url': model.imagem_url,
            'category_id': model.categoria_id,
            'category_name': model.categoria.nome if model.categoria_id else None,
            'available': model.disponivel,
        }

    @classmethod
    def to_entity(cls, model: Any) -> Optional[ProdutoEntity]:
        if not model: return None
        return normalizacao.normalizar_produto(cls.to_row(model))


class OpcaoProdutoMapper:
    """Mapeador para OpcaoProduto e suas variações."""

    @staticmethod
    def to_row(model: Any) -> Dict[str, Any]:
        return {
            'id': model.id,
            'title': model.titulo,
            'required': model.obrigatoria,
            'max_options': model.max_opcoes,
        }

    @staticmethod
    def variacoes_to_rows(model: Any) -> List[Dict[str, Any]]:
        return [
            {'id': variacao.id, 'name': variacao.nome, 'price': variacao.preco}
            for variacao in model.variacoes.all()
        ]

    @classmethod
    def to_entity(cls, model: Any) -> Optional[OpcaoProdutoEntity]:
        if not model: return None
        return normalizacao.normalizar_opcao(cls.to_row(model), cls.variacoes_to_rows(model))


# ====================================================================
# MAPERS DE PERFIL E PEDIDO
# ====================================================================

class PerfilMapper:
    """Mapeador para Perfil (tabela profiles)."""

    @staticmethod
    def to_entity(model: Any) -> Optional[PerfilEntity]:
        if not model: return None
        return PerfilEntity(
            id=str(model.pk),
            nome=model.nome,
            telefone=model.telefone,
            email=model.email,
        )


class PedidoMapper:
    """Mapeador para Pedido."""

    @staticmethod
    def to_row(model: Any) -> Dict[str, Any]:
        """Linha da tabela orders exatamente como armazenada."""
        return {
            'id': model.id,
            'user_id': model.usuario_id,
            'status': model.status,
            'total': model.total,
            'items': model.itens,
            'address': model.endereco,
            'created_at': model.criado_em,
            'updated_at': model.atualizado_em,
        }

    @classmethod
    def to_entity(cls, model: Any) -> Optional[PedidoEntity]:
        """Converte Pedido Model para Pedido Entity via normalizador."""
        if not model: return None
        return normalizacao.normalizar_pedido(cls.to_row(model))
