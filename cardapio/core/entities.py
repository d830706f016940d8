from dataclasses import dataclass, field
from decimal import Decimal
from datetime import datetime
from enum import Enum
from typing import List, Optional, Dict, Union
import time
import uuid

# ====================================================================
# ENTIDADES CORE
# Representam os objetos de negócio puros (projeções das linhas do banco).
# ====================================================================

IMAGEM_PADRAO = "https://source.unsplash.com/featured/?food"
CATEGORIA_PADRAO = "Sem categoria"


class StatusPedido(str, Enum):
    """Status possíveis de um pedido. Não há restrição de transição."""
    PENDENTE = 'pending'
    EM_PREPARACAO = 'processing'
    EM_ENTREGA = 'delivering'
    ENTREGUE = 'delivered'
    CANCELADO = 'cancelled'
    AGUARDANDO_PAGAMENTO = 'awaiting_payment'

    @property
    def label(self) -> str:
        return STATUS_INFO[self.value]['label']

    @property
    def cor(self) -> str:
        return STATUS_INFO[self.value]['cor']

    @classmethod
    def choices(cls):
        """Formato aceito pelo Django (models/forms)."""
        return [(status.value, status.label) for status in cls]


STATUS_INFO = {
    'pending': {'label': 'Pendente', 'cor': 'bg-yellow-500'},
    'processing': {'label': 'Em preparação', 'cor': 'bg-amber-500'},
    'delivering': {'label': 'Em entrega', 'cor': 'bg-blue-500'},
    'delivered': {'label': 'Entregue', 'cor': 'bg-green-500'},
    'cancelled': {'label': 'Cancelado', 'cor': 'bg-red-500'},
    'awaiting_payment': {'label': 'Aguardando pagamento', 'cor': 'bg-orange-500'},
}


@dataclass
class Perfil:
    """Dados de contato do cliente (tabela profiles)."""
    id: str
    nome: str = ""
    telefone: str = ""
    email: str = ""


@dataclass
class Endereco:
    """Endereço de entrega. Sempre possui os seis campos, nunca parcial."""
    rua: str = ""
    numero: str = ""
    bairro: str = ""
    cidade: str = ""
    estado: str = ""
    cep: str = ""

    # Chaves usadas no JSON armazenado na coluna orders.address
    CHAVES = {
        'rua': 'street',
        'numero': 'number',
        'bairro': 'neighborhood',
        'cidade': 'city',
        'estado': 'state',
        'cep': 'zipCode',
    }

    def as_dict(self) -> Dict[str, str]:
        return {chave: getattr(self, campo) for campo, chave in self.CHAVES.items()}

    @property
    def vazio(self) -> bool:
        return not any(self.as_dict().values())

    def formatar_endereco_texto(self) -> str:
        if self.vazio:
            return ""
        return f"{self.rua}, {self.numero} - {self.bairro} - {self.cidade}/{self.estado} - CEP: {self.cep}"


@dataclass
class Categoria:
    """Categoria do cardápio (Ex: Lanches, Bebidas)."""
    nome: str
    id: Optional[int] = None
    ordem: int = 0


@dataclass
class Produto:
    """Produto do cardápio."""
    id: str
    nome: str
    preco: Decimal
    descricao: str = ""
    imagem: str = IMAGEM_PADRAO
    categoria: str = CATEGORIA_PADRAO
    categoria_id: Optional[int] = None
    disponivel: bool = True


@dataclass
class Variacao:
    """Valor selecionável dentro de uma opção, com acréscimo de preço."""
    id: str
    nome: str
    preco: Decimal = Decimal('0')


@dataclass
class OpcaoProduto:
    """Grupo de escolha de um produto (Ex: Tamanho, Adicionais)."""
    id: str
    titulo: str
    obrigatoria: bool = False
    max_opcoes: Optional[int] = None
    variacoes: List[Variacao] = field(default_factory=list)

    @property
    def limite_selecoes(self) -> int:
        return self.max_opcoes or 1

    @property
    def multipla_escolha(self) -> bool:
        """True exibe checkboxes; False exibe radio (escolha única)."""
        return self.limite_selecoes > 1

    def buscar_variacao(self, variacao_id: str) -> Optional[Variacao]:
        return next((v for v in self.variacoes if str(v.id) == str(variacao_id)), None)


@dataclass
class ItemPedido:
    """Item de um pedido, como gravado na coluna orders.items."""
    produto_id: str
    nome: str = ""
    quantidade: int = 1
    preco_unitario: Decimal = Decimal('0')
    preco_total: Optional[Decimal] = None
    opcoes_selecionadas: Dict[str, List[str]] = field(default_factory=dict)
    imagem: Optional[str] = None

    def __post_init__(self):
        if self.preco_total is None:
            self.preco_total = self.preco_unitario * self.quantidade


@dataclass
class Pedido:
    """Entidade do Pedido."""
    id: str
    usuario_id: Optional[str]
    status: Union[StatusPedido, str]
    total: Decimal
    itens: List[ItemPedido] = field(default_factory=list)
    endereco: Endereco = field(default_factory=Endereco)
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None
    nome_cliente: Optional[str] = None
    perfil: Optional[Perfil] = None

    @property
    def quantidade_itens(self) -> int:
        return len(self.itens)

    @property
    def codigo_curto(self) -> str:
        return str(self.id)[:8]

    @property
    def status_label(self) -> str:
        if isinstance(self.status, StatusPedido):
            return self.status.label
        return 'Desconhecido'

    @property
    def status_cor(self) -> str:
        if isinstance(self.status, StatusPedido):
            return self.status.cor
        return 'bg-gray-500'

    @property
    def cliente(self) -> str:
        """Nome exibido no painel: perfil, depois o nome gravado no endereço."""
        if self.perfil and self.perfil.nome:
            return self.perfil.nome
        return self.nome_cliente or 'Cliente não encontrado'


@dataclass
class ItemCarrinho:
    """Item adicionado ao carrinho, já com o preço das variações aplicado."""
    produto_id: str
    nome: str
    preco: Decimal
    quantidade: int
    imagem: str = IMAGEM_PADRAO
    opcoes_selecionadas: Dict[str, List[str]] = field(default_factory=dict)
    preco_total: Optional[Decimal] = None
    id: str = ""

    def __post_init__(self):
        if not self.id:
            self.id = f"{self.produto_id}-{int(time.time() * 1000)}"
        if self.preco_total is None:
            self.preco_total = self.preco * self.quantidade

    def to_dict(self) -> dict:
        """Formato gravado na sessão e no campo items do pedido."""
        return {
            'id': self.id,
            'productId': str(self.produto_id),
            'name': self.nome,
            'price': str(self.preco),
            'quantity': self.quantidade,
            'image': self.imagem,
            'selectedOptions': self.opcoes_selecionadas,
            'totalPrice': str(self.preco_total),
        }


@dataclass
class Carrinho:
    """Carrinho de compras em memória (persistido na sessão)."""
    itens: List[ItemCarrinho] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((item.preco_total for item in self.itens), Decimal('0'))

    @property
    def quantidade_total(self) -> int:
        return sum(item.quantidade for item in self.itens)

    def get_item(self, item_id: str) -> Optional[ItemCarrinho]:
        return next((item for item in self.itens if item.id == item_id), None)

    def is_empty(self) -> bool:
        return not self.itens


@dataclass
class InfoLoja:
    """Metadados da loja exibidos em todas as telas."""
    nome: str
    telefone: str = ""
    endereco: str = ""
    taxa_entrega: Decimal = Decimal('0')


@dataclass
class Cotacao:
    """Resultado do cálculo de preço de um produto com as opções escolhidas."""
    produto: Produto
    quantidade: int
    preco_total: Decimal
    preco_unitario: Decimal
    opcoes_selecionadas: Dict[str, List[str]] = field(default_factory=dict)


def gerar_id() -> str:
    return str(uuid.uuid4())
