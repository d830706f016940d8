"""
Camada de Infraestrutura: Implementação de Repositórios.

Esta camada traduz as operações abstratas definidas nas Portas do Core
em chamadas concretas ao Django ORM (tabelas orders, profiles, products,
product_options, option_variations e categories).
"""
import copy
import functools
import logging
from decimal import Decimal
from typing import Dict, List, Optional

from django.apps import apps
from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import Prefetch, Q
from django.utils import timezone

# Importações da Camada CORE (ENTIDADES e PORTAS)
from cardapio.core.entities import (
    Categoria, Endereco, InfoLoja, OpcaoProduto, Pedido, Perfil, Produto, StatusPedido, Variacao, gerar_id,
)
from cardapio.core.exceptions import BackendIndisponivelError
from cardapio.core.normalizacao import endereco_para_json, normalizar_pedido
from cardapio.core.ports import (
    ICategoriaRepository,
    IInfoLojaProvider,
    IPedidoRepository,
    IPerfilRepository,
    IProdutoRepository,
)

from .mappers import CategoriaMapper, OpcaoProdutoMapper, PedidoMapper, PerfilMapper, ProdutoMapper

logger = logging.getLogger(__name__)


# Helper para Lazy Loading
def get_model(model_name):
    """Busca o modelo Django de forma segura (Lazy Loading)."""
    return apps.get_model('infrastructure', model_name)


def traduz_erro_backend(metodo):
    """Converte falhas do banco (DatabaseError) em BackendIndisponivelError."""
    @functools.wraps(metodo)
    def wrapper(*args, **kwargs):
        try:
            return metodo(*args, **kwargs)
        except DatabaseError as exc:
            logger.error("Erro no backend em %s: %s", metodo.__qualname__, exc)
            raise BackendIndisponivelError(f"Erro ao acessar o banco de dados: {exc}") from exc
    return wrapper


# ====================================================================
# 1. REPOSITÓRIOS (Implementação Django ORM)
# ====================================================================

class ProdutoRepositoryDjango(IProdutoRepository):
    """Implementação do ProdutoRepository usando o Django ORM."""

    # Propriedades para carregar modelos de forma LAZY
    @property
    def ProdutoModel(self):
        return get_model('Produto')

    @property
    def OpcaoModel(self):
        return get_model('OpcaoProduto')

    @traduz_erro_backend
    def buscar_por_id(self, produto_id: str) -> Optional[Produto]:
        try:
            model = self.ProdutoModel.objects.select_related('categoria').get(pk=produto_id)
            return ProdutoMapper.to_entity(model)
        except self.ProdutoModel.DoesNotExist:
            return None

    @traduz_erro_backend
    def buscar_por_criterios(
        self,
        busca: Optional[str] = None,
        categoria_id: Optional[int] = None,
        apenas_disponiveis: bool = True,
    ) -> List[Produto]:
        qs = self.ProdutoModel.objects.select_related('categoria')

        if apenas_disponiveis:
            qs = qs.filter(disponivel=True)

        if busca:
            # Busca por nome ou descrição
            qs = qs.filter(Q(nome__icontains=busca) | Q(descricao__icontains=busca))

        if categoria_id:
            qs = qs.filter(categoria_id=categoria_id)

        return [ProdutoMapper.to_entity(model) for model in qs]

    @traduz_erro_backend
    def buscar_opcoes(self, produto_id: str) -> List[OpcaoProduto]:
        qs = self.OpcaoModel.objects.filter(produto_id=produto_id).prefetch_related(
            Prefetch('variacoes', queryset=get_model('VariacaoOpcao').objects.order_by('ordem', 'nome'))
        )
        return [OpcaoProdutoMapper.to_entity(model) for model in qs]


class CategoriaRepositoryDjango(ICategoriaRepository):
    """Implementação do CategoriaRepository usando o Django ORM."""

    @traduz_erro_backend
    def buscar_todas(self) -> List[Categoria]:
        return [CategoriaMapper.to_entity(model) for model in get_model('Categoria').objects.all()]


class PerfilRepositoryDjango(IPerfilRepository):
    """Implementação do PerfilRepository (tabela profiles)."""

    @traduz_erro_backend
    def buscar_por_id(self, usuario_id: str) -> Optional[Perfil]:
        PerfilModel = get_model('Perfil')
        try:
            return PerfilMapper.to_entity(PerfilModel.objects.get(pk=usuario_id))
        except PerfilModel.DoesNotExist:
            return None


class PedidoRepositoryDjango(IPedidoRepository):
    """Implementação do PedidoRepository usando o Django ORM."""

    @property
    def PedidoModel(self):
        return get_model('Pedido')

    @traduz_erro_backend
    def buscar_por_id(self, pedido_id: str) -> Optional[Pedido]:
        try:
            return PedidoMapper.to_entity(self.PedidoModel.objects.get(pk=pedido_id))
        except self.PedidoModel.DoesNotExist:
            return None

    @traduz_erro_backend
    @transaction.atomic
    def criar_pedido(
        self,
        usuario_id: Optional[str],
        itens: List[dict],
        endereco: Endereco,
        total,
        status: StatusPedido,
        nome_cliente: Optional[str] = None,
    ) -> Pedido:
        """Insere uma linha na tabela orders e devolve a Entidade relida."""
        model = self.PedidoModel.objects.create(
            usuario_id=usuario_id,
            itens=itens,
            endereco=endereco_para_json(endereco, nome_cliente),
            total=total,
            status=StatusPedido(status).value,
        )
        return PedidoMapper.to_entity(model)

    @traduz_erro_backend
    def atualizar_status(self, pedido_id: str, novo_status: StatusPedido) -> Optional[Pedido]:
        """
        Escrita direta de status e updated_at. Itens e total não são tocados.
        Retorna None quando o pedido não existe.
        """
        atualizados = self.PedidoModel.objects.filter(pk=pedido_id).update(
            status=StatusPedido(novo_status).value,
            atualizado_em=timezone.now(),
        )
        if not atualizados:
            return None
        return self.buscar_por_id(pedido_id)

    @traduz_erro_backend
    def listar_pedidos_por_usuario(self, usuario_id: str) -> List[Pedido]:
        """Lista todos os pedidos de um usuário."""
        qs = self.PedidoModel.objects.filter(usuario_id=usuario_id).order_by('-criado_em')
        return [PedidoMapper.to_entity(model) for model in qs]

    @traduz_erro_backend
    def listar_todos_pedidos(self, status: Optional[str] = None, busca: Optional[str] = None) -> List[Pedido]:
        """Lista todos os pedidos, opcionalmente filtrados por status e trecho do ID."""
        qs = self.PedidoModel.objects.all()
        if status:
            qs = qs.filter(status=status)
        if busca:
            qs = qs.filter(id__icontains=busca)
        qs = qs.order_by('-criado_em')
        return [PedidoMapper.to_entity(model) for model in qs]


# ====================================================================
# 2. REPOSITÓRIOS (Implementações In-Memory para Teste - Mock)
# NOTA: Estes repositórios não usam o Django ORM e servem apenas para
# testes unitários e simulações onde o DB não é necessário.
# ====================================================================

# Dados em memória para simulação
CATEGORIAS_DB: Dict[int, Categoria] = {
    1: Categoria(id=1, nome="Lanches", ordem=1),
    2: Categoria(id=2, nome="Bebidas", ordem=2),
}

PRODUTOS_DB: Dict[str, Produto] = {
    "prod-101": Produto(
        id="prod-101",
        nome="X-Burger",
        descricao="Pão, carne, queijo e molho da casa",
        preco=Decimal("10.00"),
        categoria="Lanches",
        categoria_id=1,
    ),
    "prod-102": Produto(
        id="prod-102",
        nome="Refrigerante Lata",
        descricao="350ml",
        preco=Decimal("5.00"),
        categoria="Bebidas",
        categoria_id=2,
    ),
}

OPCOES_DB: Dict[str, List[OpcaoProduto]] = {
    "prod-101": [
        OpcaoProduto(
            id="op-1", titulo="Ponto da carne", obrigatoria=True, max_opcoes=1,
            variacoes=[Variacao(id="var-1", nome="Mal passado"), Variacao(id="var-2", nome="Ao ponto")],
        ),
        OpcaoProduto(
            id="op-2", titulo="Adicionais", max_opcoes=3,
            variacoes=[
                Variacao(id="var-3", nome="Bacon", preco=Decimal("3.00")),
                Variacao(id="var-4", nome="Ovo", preco=Decimal("2.00")),
            ],
        ),
    ],
}


class ProdutoRepository(IProdutoRepository):
    """Implementação In-Memory para testes."""

    def __init__(self):
        self.produtos = copy.deepcopy(PRODUTOS_DB)
        self.opcoes = copy.deepcopy(OPCOES_DB)

    def buscar_por_id(self, produto_id: str) -> Optional[Produto]:
        return self.produtos.get(str(produto_id))

    def buscar_por_criterios(
        self,
        busca: Optional[str] = None,
        categoria_id: Optional[int] = None,
        apenas_disponiveis: bool = True,
    ) -> List[Produto]:
        resultados = list(self.produtos.values())
        if apenas_disponiveis:
            resultados = [p for p in resultados if p.disponivel]
        if busca:
            resultados = [
                p for p in resultados
                if busca.lower() in p.nome.lower() or busca.lower() in p.descricao.lower()
            ]
        if categoria_id:
            resultados = [p for p in resultados if p.categoria_id == categoria_id]
        return resultados

    def buscar_opcoes(self, produto_id: str) -> List[OpcaoProduto]:
        return self.opcoes.get(str(produto_id), [])


class CategoriaRepository(ICategoriaRepository):
    """Implementação In-Memory para testes."""

    def buscar_todas(self) -> List[Categoria]:
        return sorted(CATEGORIAS_DB.values(), key=lambda c: (c.ordem, c.nome))


class PerfilRepository(IPerfilRepository):
    """Implementação In-Memory para testes."""

    def __init__(self, perfis: Optional[Dict[str, Perfil]] = None):
        self.perfis = perfis or {}

    def buscar_por_id(self, usuario_id: str) -> Optional[Perfil]:
        return self.perfis.get(str(usuario_id))


class PedidoRepository(IPedidoRepository):
    """
    Implementação In-Memory para testes. Guarda as linhas no formato da
    tabela orders e as converte com o normalizador a cada leitura.
    """

    def __init__(self):
        self.linhas: Dict[str, dict] = {}

    def adicionar_linha(self, row: dict) -> None:
        """Insere uma linha crua (inclusive com JSON em texto)."""
        row.setdefault('created_at', timezone.now())
        self.linhas[str(row['id'])] = row

    def criar_pedido(
        self,
        usuario_id: Optional[str],
        itens: List[dict],
        endereco: Endereco,
        total,
        status: StatusPedido,
        nome_cliente: Optional[str] = None,
    ) -> Pedido:
        pedido_id = gerar_id()
        self.adicionar_linha({
            'id': pedido_id,
            'user_id': usuario_id,
            'status': StatusPedido(status).value,
            'total': total,
            'items': itens,
            'address': endereco_para_json(endereco, nome_cliente),
            'updated_at': None,
        })
        return self.buscar_por_id(pedido_id)

    def buscar_por_id(self, pedido_id: str) -> Optional[Pedido]:
        row = self.linhas.get(str(pedido_id))
        return normalizar_pedido(row) if row else None

    def atualizar_status(self, pedido_id: str, novo_status: StatusPedido) -> Optional[Pedido]:
        row = self.linhas.get(str(pedido_id))
        if not row:
            return None
        row['status'] = StatusPedido(novo_status).value
        row['updated_at'] = timezone.now()
        return normalizar_pedido(row)

    def _ordenados(self, linhas) -> List[Pedido]:
        linhas = sorted(linhas, key=lambda row: row['created_at'], reverse=True)
        return [normalizar_pedido(row) for row in linhas]

    def listar_pedidos_por_usuario(self, usuario_id: str) -> List[Pedido]:
        return self._ordenados(r for r in self.linhas.values() if r.get('user_id') == usuario_id)

    def listar_todos_pedidos(self, status: Optional[str] = None, busca: Optional[str] = None) -> List[Pedido]:
        linhas = list(self.linhas.values())
        if status:
            linhas = [r for r in linhas if r.get('status') == status]
        if busca:
            linhas = [r for r in linhas if busca.lower() in str(r['id']).lower()]
        return self._ordenados(linhas)


# ====================================================================
# 3. METADADOS DA LOJA (configuração via settings)
# ====================================================================

class InfoLojaSettings(IInfoLojaProvider):
    """Lê nome, telefone, endereço e taxa de entrega de settings.STORE_*."""

    def obter(self) -> InfoLoja:
        return InfoLoja(
            nome=settings.STORE_NAME,
            telefone=settings.STORE_PHONE,
            endereco=settings.STORE_ADDRESS,
            taxa_entrega=Decimal(str(settings.STORE_DELIVERY_FEE)),
        )
