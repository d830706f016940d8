from rest_framework import serializers

from cardapio.core.entities import Endereco, StatusPedido


# ====================================================================
# SERIALIZERS DO CARDÁPIO
# ====================================================================

class VariacaoSerializer(serializers.Serializer):
    id = serializers.CharField()
    nome = serializers.CharField()
    preco = serializers.DecimalField(max_digits=10, decimal_places=2)


class OpcaoProdutoSerializer(serializers.Serializer):
    id = serializers.CharField()
    titulo = serializers.CharField()
    obrigatoria = serializers.BooleanField()
    max_opcoes = serializers.IntegerField(allow_null=True)
    limite_selecoes = serializers.IntegerField()
    multipla_escolha = serializers.BooleanField()
    variacoes = VariacaoSerializer(many=True)


class ProdutoSerializer(serializers.Serializer):
    id = serializers.CharField()
    nome = serializers.CharField()
    descricao = serializers.CharField()
    preco = serializers.DecimalField(max_digits=10, decimal_places=2)
    imagem = serializers.CharField()
    categoria = serializers.CharField()
    categoria_id = serializers.IntegerField(allow_null=True)
    disponivel = serializers.BooleanField()


class ProdutoDetalheSerializer(serializers.Serializer):
    """Produto com as opções, como exibido na página do produto."""
    produto = ProdutoSerializer()
    opcoes = OpcaoProdutoSerializer(many=True)


class SelecoesField(serializers.DictField):
    """{id da opção: [ids das variações]}"""
    child = serializers.ListField(child=serializers.CharField())


class CotacaoRequestSerializer(serializers.Serializer):
    selecoes = SelecoesField(required=False, default=dict)
    quantidade = serializers.IntegerField(min_value=1, default=1)


class CotacaoSerializer(serializers.Serializer):
    produto_id = serializers.CharField(source='produto.id')
    quantidade = serializers.IntegerField()
    preco_unitario = serializers.DecimalField(max_digits=10, decimal_places=2)
    preco_total = serializers.DecimalField(max_digits=10, decimal_places=2)
    opcoes_selecionadas = serializers.DictField(child=serializers.ListField(child=serializers.CharField()))


# ====================================================================
# SERIALIZERS PARA O CARRINHO
# ====================================================================

class ItemCarrinhoSerializer(serializers.Serializer):
    id = serializers.CharField()
    produto_id = serializers.CharField()
    nome = serializers.CharField()
    preco = serializers.DecimalField(max_digits=10, decimal_places=2)
    quantidade = serializers.IntegerField()
    imagem = serializers.CharField()
    opcoes_selecionadas = serializers.DictField(child=serializers.ListField(child=serializers.CharField()))
    preco_total = serializers.DecimalField(max_digits=10, decimal_places=2)


class CarrinhoSerializer(serializers.Serializer):
    """
    Serializer principal para o carrinho de compras.
    """
    itens = ItemCarrinhoSerializer(many=True)
    total = serializers.DecimalField(max_digits=10, decimal_places=2)
    quantidade_total = serializers.IntegerField()


class AdicionarItemCarrinhoSerializer(CotacaoRequestSerializer):
    produto_id = serializers.CharField()


class AtualizarItemCarrinhoSerializer(serializers.Serializer):
    """Quantidade zero remove o item."""
    item_id = serializers.CharField()
    quantidade = serializers.IntegerField(min_value=0)


class RemoverItemCarrinhoSerializer(serializers.Serializer):
    item_id = serializers.CharField()


# ====================================================================
# SERIALIZERS DE PEDIDO
# ====================================================================

class CheckoutSerializer(serializers.Serializer):
    """
    Serializer para a validação dos dados de checkout.
    """
    nome = serializers.CharField(max_length=255, required=False, allow_blank=True)
    rua = serializers.CharField(max_length=255)
    numero = serializers.CharField(max_length=20)
    bairro = serializers.CharField(max_length=100)
    cidade = serializers.CharField(max_length=100)
    estado = serializers.CharField(max_length=2, required=False, allow_blank=True, default='')
    cep = serializers.CharField(max_length=9, required=False, allow_blank=True, default='')

    def validate_cep(self, value):
        cep = value.replace('-', '').strip()
        if cep and (not cep.isdigit() or len(cep) != 8):
            raise serializers.ValidationError("O CEP deve conter 8 dígitos.")
        return cep

    def to_endereco_entity(self) -> Endereco:
        return Endereco(**{campo: self.validated_data.get(campo, '') for campo in Endereco.CHAVES})


class EnderecoSerializer(serializers.Serializer):
    rua = serializers.CharField()
    numero = serializers.CharField()
    bairro = serializers.CharField()
    cidade = serializers.CharField()
    estado = serializers.CharField()
    cep = serializers.CharField()
    texto = serializers.CharField(source='formatar_endereco_texto')


class ItemPedidoSerializer(serializers.Serializer):
    produto_id = serializers.CharField()
    nome = serializers.CharField()
    quantidade = serializers.IntegerField()
    preco_unitario = serializers.DecimalField(max_digits=None, decimal_places=2)
    preco_total = serializers.DecimalField(max_digits=None, decimal_places=2)
    opcoes_selecionadas = serializers.DictField(child=serializers.ListField(child=serializers.CharField()))
    imagem = serializers.CharField(allow_null=True)


class PedidoSerializer(serializers.Serializer):
    id = serializers.CharField()
    codigo_curto = serializers.CharField()
    usuario_id = serializers.CharField(allow_null=True)
    status = serializers.SerializerMethodField()
    status_label = serializers.CharField()
    status_cor = serializers.CharField()
    total = serializers.DecimalField(max_digits=None, decimal_places=2)
    quantidade_itens = serializers.IntegerField()
    itens = ItemPedidoSerializer(many=True)
    endereco = EnderecoSerializer()
    cliente = serializers.CharField()
    criado_em = serializers.DateTimeField(allow_null=True)
    atualizado_em = serializers.DateTimeField(allow_null=True)

    def get_status(self, pedido) -> str:
        return getattr(pedido.status, 'value', pedido.status)


class StatusPedidoSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=StatusPedido.choices())
