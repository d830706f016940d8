# cardapio/presentation/views_api.py
"""
API REST (Django REST Framework) espelhando as telas da loja e do painel.
O carrinho da API é o mesmo carrinho da sessão usado pelas páginas HTML.
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from cardapio.core.exceptions import (
    BackendIndisponivelError,
    CarrinhoVazioError,
    DadosInvalidosError,
    ItemNaoEncontradoError,
    SelecaoInvalidaError,
    StatusInvalidoError,
)
from cardapio.core.use_cases import (
    CotarProdutoUseCase,
    CriarPedidoUseCase,
    DetalharProdutoUseCase,
    GerenciarCarrinhoUseCase,
    GerenciarPedidosAdminUseCase,
    ListarCardapioUseCase,
)
from cardapio.infrastructure.instances import categoria_repo, info_loja, pedido_repo, perfil_repo, produto_repo

from .cart_manager import CartManager
from .serializers import (
    AdicionarItemCarrinhoSerializer,
    AtualizarItemCarrinhoSerializer,
    CarrinhoSerializer,
    CheckoutSerializer,
    CotacaoRequestSerializer,
    CotacaoSerializer,
    PedidoSerializer,
    ProdutoDetalheSerializer,
    ProdutoSerializer,
    RemoverItemCarrinhoSerializer,
    StatusPedidoSerializer,
)


def _erro(e, http_status):
    return Response({'message': e.message}, status=http_status)


# ====================================================================
# CARDÁPIO
# ====================================================================

class ProdutoListAPIView(APIView):
    """Produtos disponíveis, com busca textual e filtro por categoria."""
    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[
            OpenApiParameter('busca', str, required=False),
            OpenApiParameter('categoria', int, required=False),
        ],
        responses=ProdutoSerializer(many=True),
    )
    def get(self, request):
        categoria = request.query_params.get('categoria')
        try:
            produtos = ListarCardapioUseCase(produto_repo, categoria_repo).listar_produtos(
                busca=request.query_params.get('busca') or None,
                categoria_id=int(categoria) if categoria and categoria.isdigit() else None,
            )
        except BackendIndisponivelError as e:
            return _erro(e, status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(ProdutoSerializer(produtos, many=True).data)


class ProdutoDetailAPIView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses=ProdutoDetalheSerializer)
    def get(self, request, pk):
        try:
            produto, opcoes = DetalharProdutoUseCase(produto_repo).executar(pk)
        except ItemNaoEncontradoError as e:
            return _erro(e, status.HTTP_404_NOT_FOUND)
        except BackendIndisponivelError as e:
            return _erro(e, status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(ProdutoDetalheSerializer({'produto': produto, 'opcoes': opcoes}).data)


class CotacaoAPIView(APIView):
    """Calcula o preço do produto com as variações escolhidas, sem alterar o carrinho."""
    permission_classes = [AllowAny]

    @extend_schema(request=CotacaoRequestSerializer, responses=CotacaoSerializer)
    def post(self, request, pk):
        serializer = CotacaoRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            cotacao = CotarProdutoUseCase(produto_repo).executar(
                pk, serializer.validated_data['selecoes'], serializer.validated_data['quantidade']
            )
        except ItemNaoEncontradoError as e:
            return _erro(e, status.HTTP_404_NOT_FOUND)
        except (SelecaoInvalidaError, DadosInvalidosError) as e:
            return _erro(e, status.HTTP_400_BAD_REQUEST)
        except BackendIndisponivelError as e:
            return _erro(e, status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(CotacaoSerializer(cotacao).data)


# ====================================================================
# CARRINHO E CHECKOUT
# ====================================================================

class CarrinhoAPIView(APIView):
    """
    Carrinho da sessão: GET consulta, POST adiciona, PATCH altera a
    quantidade e DELETE remove um item.
    """
    permission_classes = [AllowAny]

    def _uc(self, request):
        return GerenciarCarrinhoUseCase(CartManager(request))

    @extend_schema(responses=CarrinhoSerializer)
    def get(self, request):
        return Response(CarrinhoSerializer(self._uc(request).obter_carrinho()).data)

    @extend_schema(request=AdicionarItemCarrinhoSerializer, responses=CarrinhoSerializer)
    def post(self, request):
        serializer = AdicionarItemCarrinhoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dados = serializer.validated_data
        uc = self._uc(request)
        try:
            cotacao = CotarProdutoUseCase(produto_repo).executar(
                dados['produto_id'], dados['selecoes'], dados['quantidade']
            )
            uc.adicionar_item(cotacao)
        except ItemNaoEncontradoError as e:
            return _erro(e, status.HTTP_404_NOT_FOUND)
        except (SelecaoInvalidaError, DadosInvalidosError) as e:
            return _erro(e, status.HTTP_400_BAD_REQUEST)
        except BackendIndisponivelError as e:
            return _erro(e, status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(CarrinhoSerializer(uc.obter_carrinho()).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=AtualizarItemCarrinhoSerializer, responses=CarrinhoSerializer)
    def patch(self, request):
        serializer = AtualizarItemCarrinhoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            carrinho = self._uc(request).atualizar_quantidade(
                serializer.validated_data['item_id'], serializer.validated_data['quantidade']
            )
        except ItemNaoEncontradoError as e:
            return _erro(e, status.HTTP_404_NOT_FOUND)
        return Response(CarrinhoSerializer(carrinho).data)

    @extend_schema(request=RemoverItemCarrinhoSerializer, responses=CarrinhoSerializer)
    def delete(self, request):
        serializer = RemoverItemCarrinhoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            carrinho = self._uc(request).remover_item(serializer.validated_data['item_id'])
        except ItemNaoEncontradoError as e:
            return _erro(e, status.HTTP_404_NOT_FOUND)
        return Response(CarrinhoSerializer(carrinho).data)


class CheckoutAPIView(APIView):
    """
    API View para gravar o pedido a partir do carrinho da sessão.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(request=CheckoutSerializer, responses={201: PedidoSerializer})
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        criar_pedido_uc = CriarPedidoUseCase(pedido_repo, CartManager(request), info_loja)
        try:
            pedido = criar_pedido_uc.executar(
                usuario_id=str(request.user.pk),
                endereco=serializer.to_endereco_entity(),
                nome_cliente=serializer.validated_data.get('nome') or None,
            )
        except (CarrinhoVazioError, DadosInvalidosError) as e:
            return _erro(e, status.HTTP_400_BAD_REQUEST)
        except BackendIndisponivelError as e:
            return _erro(e, status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(PedidoSerializer(pedido).data, status=status.HTTP_201_CREATED)


# ====================================================================
# PAINEL DE PEDIDOS
# ====================================================================

def _admin_uc():
    return GerenciarPedidosAdminUseCase(pedido_repo=pedido_repo, perfil_repo=perfil_repo)


class PedidoAdminListAPIView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(
        parameters=[
            OpenApiParameter('status', str, required=False, description="'all' ou um status de pedido"),
            OpenApiParameter('busca', str, required=False, description="Trecho do ID do pedido"),
        ],
        responses=PedidoSerializer(many=True),
    )
    def get(self, request):
        try:
            pedidos = _admin_uc().listar_todos(
                status=request.query_params.get('status'),
                busca=request.query_params.get('busca'),
            )
        except BackendIndisponivelError as e:
            return _erro(e, status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(PedidoSerializer(pedidos, many=True).data)


class PedidoAdminDetailAPIView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(responses=PedidoSerializer)
    def get(self, request, pk):
        try:
            pedido = _admin_uc().detalhar_pedido(pk)
        except ItemNaoEncontradoError as e:
            return _erro(e, status.HTTP_404_NOT_FOUND)
        except BackendIndisponivelError as e:
            return _erro(e, status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(PedidoSerializer(pedido).data)


class PedidoStatusAPIView(APIView):
    permission_classes = [IsAdminUser]

    @extend_schema(request=StatusPedidoSerializer, responses=PedidoSerializer)
    def patch(self, request, pk):
        serializer = StatusPedidoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            pedido = _admin_uc().atualizar_status(pk, serializer.validated_data['status'])
        except ItemNaoEncontradoError as e:
            return _erro(e, status.HTTP_404_NOT_FOUND)
        except StatusInvalidoError as e:
            return _erro(e, status.HTTP_400_BAD_REQUEST)
        except BackendIndisponivelError as e:
            return _erro(e, status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(PedidoSerializer(pedido).data)
