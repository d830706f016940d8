"""
Normalização das linhas vindas do banco para as Entidades do Core.

Os campos `items` e `address` da tabela orders podem chegar como texto JSON
(coluna json/text antiga) ou já estruturados (jsonb). Nenhuma exceção sai
deste módulo: qualquer falha de parse vira o valor padrão.
"""
import json
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from cardapio.core.entities import (
    CATEGORIA_PADRAO, IMAGEM_PADRAO,
    Endereco, ItemPedido, OpcaoProduto, Pedido, Produto, StatusPedido, Variacao,
)

logger = logging.getLogger(__name__)

# Limite de dígitos na parte inteira de um valor monetário
MAX_DIGITOS_INTEIROS = 18

# Erros possíveis ao decodificar o texto JSON de uma coluna
ERROS_JSON = (ValueError, TypeError, UnicodeDecodeError, RecursionError)


def _para_decimal(valor: Any, padrao: Decimal = Decimal('0')) -> Decimal:
    if valor is None or valor == '':
        return padrao
    try:
        resultado = Decimal(str(valor))
    except (InvalidOperation, ValueError, TypeError):
        logger.debug("Valor numérico inválido ignorado: %r", valor)
        return padrao
    if not resultado.is_finite() or resultado.adjusted() >= MAX_DIGITOS_INTEIROS:
        logger.debug("Valor numérico fora da faixa ignorado: %r", valor)
        return padrao
    return resultado


def _para_int(valor: Any, padrao: int) -> int:
    try:
        return int(valor)
    except (TypeError, ValueError):
        return padrao


def _texto(valor: Any) -> str:
    if not valor:
        return ""
    return valor if isinstance(valor, str) else str(valor)


def _carregar_json(raw: Any) -> Any:
    """Decodifica texto JSON; estruturas já decodificadas passam direto."""
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode('utf-8')
    if isinstance(raw, str):
        return json.loads(raw)
    return raw


# ====================================================================
# ITENS E ENDEREÇO
# ====================================================================

def normalizar_itens(raw: Any) -> List[Any]:
    """Converte o campo items em lista. Qualquer outra coisa vira []."""
    try:
        itens = _carregar_json(raw)
    except ERROS_JSON:
        logger.debug("Campo items ilegível: %r", raw)
        return []
    if isinstance(itens, (list, tuple)):
        return list(itens)
    return []


def normalizar_endereco(raw: Any) -> Endereco:
    """Converte o campo address no formato completo de seis campos."""
    if not raw:
        return Endereco()
    try:
        dados = _carregar_json(raw)
    except ERROS_JSON:
        logger.debug("Campo address ilegível: %r", raw)
        return Endereco()
    if not isinstance(dados, Mapping):
        return Endereco()
    return Endereco(**{
        campo: _texto(dados.get(chave))
        for campo, chave in Endereco.CHAVES.items()
    })


def extrair_nome_cliente(raw: Any) -> Optional[str]:
    """Nome do cliente gravado junto ao endereço (pedidos sem perfil)."""
    try:
        dados = _carregar_json(raw)
    except ERROS_JSON:
        return None
    if isinstance(dados, Mapping) and dados.get('customer_name'):
        return _texto(dados['customer_name'])
    return None


def _nomes_opcao(nomes: Any) -> List[str]:
    if nomes is None:
        return []
    if isinstance(nomes, (list, tuple)):
        return [str(nome) for nome in nomes if nome is not None]
    return [str(nomes)]


def normalizar_item_pedido(raw: Mapping) -> ItemPedido:
    """Aceita chaves camelCase (gravadas pelo carrinho) ou snake_case."""
    quantidade = max(_para_int(raw.get('quantity', 1), 1), 1)
    preco_unitario = _para_decimal(raw.get('price'))
    total_raw = raw.get('totalPrice', raw.get('total_price'))
    opcoes = raw.get('selectedOptions', raw.get('selected_options')) or {}
    if not isinstance(opcoes, Mapping):
        opcoes = {}
    return ItemPedido(
        produto_id=_texto(raw.get('productId', raw.get('product_id'))),
        nome=_texto(raw.get('name')),
        quantidade=quantidade,
        preco_unitario=preco_unitario,
        preco_total=_para_decimal(total_raw if total_raw is not None else preco_unitario * quantidade),
        opcoes_selecionadas={
            str(titulo): _nomes_opcao(nomes) for titulo, nomes in opcoes.items()
        },
        imagem=raw.get('image'),
    )


def _normalizar_status(raw: Any):
    try:
        return StatusPedido(raw)
    except ValueError:
        # Mantém o valor bruto; a tela exibe "Desconhecido"
        return _texto(raw)


def _normalizar_data(raw: Any) -> Optional[datetime]:
    if isinstance(raw, datetime) or raw is None:
        return raw
    try:
        return datetime.fromisoformat(str(raw).replace('Z', '+00:00'))
    except ValueError:
        logger.debug("Data inválida ignorada: %r", raw)
        return None


def normalizar_pedido(row: Mapping) -> Pedido:
    """Converte uma linha da tabela orders em Entidade Pedido."""
    itens = [
        normalizar_item_pedido(item)
        for item in normalizar_itens(row.get('items'))
        if isinstance(item, Mapping)
    ]
    usuario_id = row.get('user_id')
    return Pedido(
        id=_texto(row.get('id')),
        usuario_id=str(usuario_id) if usuario_id is not None else None,
        status=_normalizar_status(row.get('status')),
        total=_para_decimal(row.get('total')),
        itens=itens,
        endereco=normalizar_endereco(row.get('address')),
        criado_em=_normalizar_data(row.get('created_at')),
        atualizado_em=_normalizar_data(row.get('updated_at')),
        nome_cliente=extrair_nome_cliente(row.get('address')),
    )


# ====================================================================
# CATÁLOGO
# ====================================================================

def normalizar_produto(row: Mapping) -> Produto:
    """Converte uma linha de products (com o nome da categoria) em Produto."""
    categoria = row.get('category_name')
    if categoria is None and isinstance(row.get('categories'), Mapping):
        categoria = row['categories'].get('name')
    return Produto(
        id=_texto(row.get('id')),
        nome=_texto(row.get('name')),
        descricao=_texto(row.get('description')),
        preco=_para_decimal(row.get('price')),
        imagem=row.get('image_url') or IMAGEM_PADRAO,
        categoria=categoria or CATEGORIA_PADRAO,
        categoria_id=row.get('category_id'),
        disponivel=bool(row.get('available', True)),
    )


def normalizar_opcao(row: Mapping, variacoes: List[Mapping]) -> OpcaoProduto:
    """Converte product_options + option_variations em OpcaoProduto."""
    obrigatoria = bool(row.get('required') or False)
    max_opcoes = row.get('max_options')
    if max_opcoes is None and obrigatoria:
        max_opcoes = 1
    return OpcaoProduto(
        id=_texto(row.get('id')),
        titulo=_texto(row.get('title')),
        obrigatoria=obrigatoria,
        max_opcoes=_para_int(max_opcoes, 1) if max_opcoes is not None else None,
        variacoes=[
            Variacao(
                id=_texto(variacao.get('id')),
                nome=_texto(variacao.get('name')),
                preco=_para_decimal(variacao.get('price')),
            )
            for variacao in variacoes
        ],
    )


def endereco_para_json(endereco: Endereco, nome_cliente: Optional[str] = None) -> Dict[str, str]:
    """Formato gravado na coluna orders.address."""
    dados = endereco.as_dict()
    if nome_cliente:
        dados['customer_name'] = nome_cliente
    return dados
