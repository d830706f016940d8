# cardapio/core/use_cases.py
"""
Implementação dos Casos de Uso (Lógica de Negócio) da aplicação.
Esta camada depende apenas das Entidades e Portas (Interfaces) do Core,
garantindo o isolamento da lógica de negócio.
"""
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Tuple

# Entidades e Exceções
from cardapio.core.entities import (
    Carrinho, Categoria, Cotacao, Endereco, ItemCarrinho, OpcaoProduto, Pedido, Produto, StatusPedido,
)
from cardapio.core.exceptions import (
    BackendIndisponivelError,
    CarrinhoVazioError,
    DadosInvalidosError,
    ItemNaoEncontradoError,
    PedidoNaoEncontradoError,
    ProdutoNaoEncontradoError,
    StatusInvalidoError,
)
from cardapio.core import precificacao

# Portas (Interfaces) - Importadas do cardapio/core/ports.py
from cardapio.core.ports import (
    ICarrinhoStore,
    ICategoriaRepository,
    IInfoLojaProvider,
    IPedidoRepository,
    IPerfilRepository,
    IProdutoRepository,
)

logger = logging.getLogger(__name__)


# ====================================================================
# 1. CASOS DE USO DO CARDÁPIO
# ====================================================================

class ListarCardapioUseCase:
    """Caso de Uso responsável por listar produtos com filtros e categorias."""
    def __init__(self, produto_repo: IProdutoRepository, categoria_repo: ICategoriaRepository):
        self.produto_repo = produto_repo
        self.categoria_repo = categoria_repo

    def listar_produtos(
        self,
        busca: Optional[str] = None,
        categoria_id: Optional[int] = None
    ) -> List[Produto]:
        """Retorna os produtos disponíveis filtrados por busca textual e/ou categoria."""
        return self.produto_repo.buscar_por_criterios(
            busca=busca,
            categoria_id=categoria_id,
            apenas_disponiveis=True,
        )

    def listar_categorias(self) -> List[Categoria]:
        """Retorna a lista de todas as categorias."""
        return self.categoria_repo.buscar_todas()

    def agrupar_por_categoria(self, produtos: List[Produto]) -> List[Tuple[str, List[Produto]]]:
        """Agrupa os produtos mantendo a ordem das categorias cadastradas."""
        grupos: Dict[str, List[Produto]] = OrderedDict(
            (categoria.nome, []) for categoria in self.listar_categorias()
        )
        for produto in produtos:
            grupos.setdefault(produto.categoria, []).append(produto)
        return [(nome, itens) for nome, itens in grupos.items() if itens]


class DetalharProdutoUseCase:
    """Caso de Uso para obter um produto e suas opções."""
    def __init__(self, produto_repo: IProdutoRepository):
        self.produto_repo = produto_repo

    def executar(self, produto_id: str) -> Tuple[Produto, List[OpcaoProduto]]:
        produto = self.produto_repo.buscar_por_id(produto_id)
        if not produto:
            raise ProdutoNaoEncontradoError(f"Produto ID {produto_id} não encontrado.")

        try:
            opcoes = self.produto_repo.buscar_opcoes(produto_id)
        except BackendIndisponivelError:
            # O produto ainda é exibido, apenas sem opções
            logger.exception("Erro ao buscar opções do produto %s", produto_id)
            opcoes = []

        return produto, opcoes


class CotarProdutoUseCase:
    """
    Caso de Uso que calcula o preço de um produto com as variações escolhidas.
    """
    def __init__(self, produto_repo: IProdutoRepository):
        self.detalhar_uc = DetalharProdutoUseCase(produto_repo)

    def executar(self, produto_id: str, selecoes: Mapping[str, List[str]], quantidade: int = 1) -> Cotacao:
        if quantidade < 1:
            raise DadosInvalidosError("A quantidade deve ser pelo menos 1.")

        produto, opcoes = self.detalhar_uc.executar(produto_id)
        precificacao.validar_selecoes(selecoes, opcoes)

        total = precificacao.calcular_preco_total(selecoes, opcoes, produto.preco, quantidade)
        return Cotacao(
            produto=produto,
            quantidade=quantidade,
            preco_total=total,
            preco_unitario=total / quantidade,
            opcoes_selecionadas=precificacao.nomes_selecionados(selecoes, opcoes),
        )


# ====================================================================
# 2. CASOS DE USO DO CARRINHO
# ====================================================================

class GerenciarCarrinhoUseCase:
    """
    Caso de Uso que centraliza a gestão do carrinho (adicionar, remover, quantidade).
    """
    def __init__(self, carrinho_store: ICarrinhoStore):
        self.carrinho_store = carrinho_store

    def obter_carrinho(self) -> Carrinho:
        return self.carrinho_store.get_carrinho()

    def adicionar_item(self, cotacao: Cotacao) -> ItemCarrinho:
        """Cria o item a partir de uma cotação e o adiciona ao carrinho."""
        item = ItemCarrinho(
            produto_id=cotacao.produto.id,
            nome=cotacao.produto.nome,
            preco=cotacao.preco_unitario,
            quantidade=cotacao.quantidade,
            imagem=cotacao.produto.imagem,
            opcoes_selecionadas=cotacao.opcoes_selecionadas,
            preco_total=cotacao.preco_total,
        )
        self.carrinho_store.add_item(item)
        return item

    def remover_item(self, item_id: str) -> Carrinho:
        """Remove um item do carrinho completamente."""
        if not self.carrinho_store.get_carrinho().get_item(item_id):
            raise ItemNaoEncontradoError("Item não encontrado no carrinho.")
        return self.carrinho_store.remove_item(item_id)

    def atualizar_quantidade(self, item_id: str, quantidade: int) -> Carrinho:
        """Quantidade zero ou negativa remove o item."""
        if not self.carrinho_store.get_carrinho().get_item(item_id):
            raise ItemNaoEncontradoError("Item não encontrado no carrinho.")
        if quantidade <= 0:
            return self.carrinho_store.remove_item(item_id)
        return self.carrinho_store.update_quantity(item_id, quantidade)


# ====================================================================
# 3. CASOS DE USO DE PEDIDO E CHECKOUT
# ====================================================================

class CriarPedidoUseCase:
    """
    Caso de Uso que finaliza o checkout: grava o pedido e esvazia o carrinho.
    """
    CAMPOS_OBRIGATORIOS = ('rua', 'numero', 'bairro', 'cidade')

    def __init__(
        self,
        pedido_repo: IPedidoRepository,
        carrinho_store: ICarrinhoStore,
        info_loja: IInfoLojaProvider,
    ):
        self.pedido_repo = pedido_repo
        self.carrinho_store = carrinho_store
        self.info_loja = info_loja

    def executar(
        self,
        usuario_id: Optional[str],
        endereco: Endereco,
        nome_cliente: Optional[str] = None,
    ) -> Pedido:
        """Processa o checkout."""
        carrinho = self.carrinho_store.get_carrinho()
        if carrinho.is_empty():
            raise CarrinhoVazioError("Não é possível finalizar o pedido com o carrinho vazio.")

        faltando = [campo for campo in self.CAMPOS_OBRIGATORIOS if not getattr(endereco, campo).strip()]
        if faltando:
            raise DadosInvalidosError(f"Endereço incompleto: preencha {', '.join(faltando)}.")

        total = total_do_carrinho(carrinho, self.info_loja.obter().taxa_entrega)

        pedido = self.pedido_repo.criar_pedido(
            usuario_id=usuario_id,
            itens=[item.to_dict() for item in carrinho.itens],
            endereco=endereco,
            total=total,
            status=StatusPedido.PENDENTE,
            nome_cliente=nome_cliente,
        )
        logger.info("Pedido %s criado (total %s)", pedido.id, total)

        self.carrinho_store.clear_carrinho()
        return pedido


class ListarPedidosDoUsuarioUseCase:
    """Caso de Uso para listar os pedidos de um cliente específico."""
    def __init__(self, pedido_repo: IPedidoRepository):
        self.pedido_repo = pedido_repo

    def executar(self, usuario_id: str) -> List[Pedido]:
        """Retorna a lista de pedidos do usuário."""
        return self.pedido_repo.listar_pedidos_por_usuario(usuario_id)


# ====================================================================
# 4. CASOS DE USO ADMINISTRATIVOS
# ====================================================================

class GerenciarPedidosAdminUseCase:
    """Caso de Uso para listagem e atualização de pedidos (acesso administrativo)."""

    FILTRO_TODOS = 'all'

    def __init__(self, pedido_repo: IPedidoRepository, perfil_repo: IPerfilRepository):
        self.pedido_repo = pedido_repo
        self.perfil_repo = perfil_repo

    def _anexar_perfil(self, pedido: Pedido) -> Pedido:
        if not pedido.usuario_id:
            return pedido
        try:
            pedido.perfil = self.perfil_repo.buscar_por_id(pedido.usuario_id)
        except BackendIndisponivelError:
            logger.warning("Perfil %s indisponível para o pedido %s", pedido.usuario_id, pedido.id)
            pedido.perfil = None
        return pedido

    def listar_todos(self, status: Optional[str] = None, busca: Optional[str] = None) -> List[Pedido]:
        """Lista todos os pedidos (mais recentes primeiro) com filtro por status e busca por ID."""
        if status == self.FILTRO_TODOS:
            status = None
        pedidos = self.pedido_repo.listar_todos_pedidos(status=status or None, busca=(busca or '').strip() or None)
        # Uma consulta de perfil por pedido
        return [self._anexar_perfil(pedido) for pedido in pedidos]

    def detalhar_pedido(self, pedido_id: str) -> Pedido:
        """Busca os detalhes de um pedido específico."""
        pedido = self.pedido_repo.buscar_por_id(pedido_id)
        if not pedido:
            raise PedidoNaoEncontradoError(f"Pedido ID {pedido_id} não encontrado.")
        return self._anexar_perfil(pedido)

    def atualizar_status(self, pedido_id: str, novo_status: str) -> Pedido:
        """Qualquer status pode ser definido a partir de qualquer outro."""
        try:
            status = StatusPedido(novo_status)
        except ValueError:
            raise StatusInvalidoError(f"O status '{novo_status}' não é um status de pedido válido.")

        pedido = self.pedido_repo.atualizar_status(pedido_id, status)
        if not pedido:
            raise PedidoNaoEncontradoError(f"Pedido ID {pedido_id} não encontrado.")

        logger.info("Pedido %s atualizado para %s", pedido_id, status.value)
        return self._anexar_perfil(pedido)


def total_do_carrinho(carrinho: Carrinho, taxa_entrega: Decimal = Decimal('0')) -> Decimal:
    """Total a pagar: itens do carrinho mais a taxa de entrega."""
    return carrinho.total + taxa_entrega
