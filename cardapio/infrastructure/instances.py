"""
Módulo de inicialização dos repositórios.
Deve ser importado somente depois que o Django estiver configurado.
"""

from .repositories import (
    InfoLojaSettings,
    CategoriaRepositoryDjango as CategoriaRepository,
    PedidoRepositoryDjango as PedidoRepository,
    PerfilRepositoryDjango as PerfilRepository,
    ProdutoRepositoryDjango as ProdutoRepository,
)

# Instâncias globais dos repositórios
produto_repo = ProdutoRepository()
categoria_repo = CategoriaRepository()
pedido_repo = PedidoRepository()
perfil_repo = PerfilRepository()
info_loja = InfoLojaSettings()
