import logging

from django.views import View
from django.shortcuts import render, redirect
from django.http import Http404
from django.contrib import messages
from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import PermissionDenied
from django.views.decorators.http import require_POST

from cardapio.infrastructure.instances import categoria_repo, info_loja, pedido_repo, perfil_repo, produto_repo
from cardapio.core.use_cases import (
    CotarProdutoUseCase,
    CriarPedidoUseCase,
    DetalharProdutoUseCase,
    GerenciarCarrinhoUseCase,
    ListarCardapioUseCase,
    ListarPedidosDoUsuarioUseCase,
    total_do_carrinho,
)
from cardapio.core.exceptions import (
    BackendIndisponivelError,
    BaseErroCore,
    CarrinhoVazioError,
    DadosInvalidosError,
    ItemNaoEncontradoError,
    ProdutoNaoEncontradoError,
    SelecaoInvalidaError,
)

from .cart_manager import CartManager
from .forms import AdicionarItemCarrinhoForm, CheckoutForm, QuantidadeItemForm

logger = logging.getLogger(__name__)


# ====================================================================
# VIEWS: Orquestram a requisição, a execução dos casos de uso e a resposta.
# ====================================================================

class CardapioView(View):
    """
    Página inicial: produtos disponíveis agrupados por categoria, com busca
    textual (?busca=) e filtro de categoria (?categoria=<id>).
    """
    template_name = 'cardapio/menu.html'

    def get(self, request):
        busca_termo = request.GET.get('busca', '').strip()
        categoria_selecionada = request.GET.get('categoria', '')
        try:
            categoria_id = int(categoria_selecionada) if categoria_selecionada else None
        except ValueError:
            categoria_id = None
            categoria_selecionada = ''

        uc = ListarCardapioUseCase(produto_repo, categoria_repo)
        try:
            categorias = uc.listar_categorias()
            produtos = uc.listar_produtos(busca=busca_termo or None, categoria_id=categoria_id)
            grupos = uc.agrupar_por_categoria(produtos)
        except BackendIndisponivelError as e:
            logger.exception("Erro ao carregar o cardápio")
            messages.error(request, f"Erro ao carregar o cardápio: {e.message}")
            categorias, grupos = [], []

        context = {
            'grupos': grupos,
            'categorias': categorias,
            'busca_termo': busca_termo,
            'categoria_selecionada': categoria_selecionada,
        }
        return render(request, self.template_name, context)


def _carregar_produto(produto_id):
    """Produto e opções; 404 quando o produto não existe."""
    try:
        return DetalharProdutoUseCase(produto_repo).executar(produto_id)
    except ProdutoNaoEncontradoError:
        raise Http404("Produto não encontrado.")


def _contexto_produto(produto, opcoes, form):
    return {
        'produto': produto,
        'opcoes': opcoes,
        'form': form,
        # Acréscimos por variação, lidos pelo script que atualiza o preço na tela
        'precos_variacoes': {v.id: str(v.preco) for opcao in opcoes for v in opcao.variacoes},
    }


class DetalheProdutoView(View):
    """
    Página do produto com as opções (radio/checkbox) e o preço calculado.
    """
    template_name = 'cardapio/detalhe_produto.html'

    def get(self, request, pk):
        try:
            produto, opcoes = _carregar_produto(pk)
        except BackendIndisponivelError as e:
            messages.error(request, f"Erro ao carregar o produto: {e.message}")
            return redirect('cardapio')

        form = AdicionarItemCarrinhoForm(opcoes=opcoes)
        return render(request, self.template_name, _contexto_produto(produto, opcoes, form))


@require_POST
def adicionar_ao_carrinho(request, produto_id):
    """
    Calcula o preço com as variações escolhidas e adiciona uma linha ao carrinho.
    """
    try:
        produto, opcoes = _carregar_produto(produto_id)
    except BackendIndisponivelError as e:
        messages.error(request, f"Erro ao carregar o produto: {e.message}")
        return redirect('cardapio')

    form = AdicionarItemCarrinhoForm(request.POST, opcoes=opcoes)
    if not form.is_valid():
        messages.error(request, "Revise as opções escolhidas.")
        return render(
            request, DetalheProdutoView.template_name, _contexto_produto(produto, opcoes, form), status=400
        )

    try:
        cotacao = CotarProdutoUseCase(produto_repo).executar(
            produto_id, form.selecoes(), form.cleaned_data['quantidade']
        )
        item = GerenciarCarrinhoUseCase(CartManager(request)).adicionar_item(cotacao)
    except (SelecaoInvalidaError, DadosInvalidosError, BackendIndisponivelError) as e:
        messages.error(request, e.message)
        return redirect('detalhe_produto', pk=produto_id)

    messages.success(request, f"{item.nome} adicionado ao carrinho!")
    return redirect('carrinho')


class CarrinhoView(View):
    """
    View para a página do carrinho de compras.
    """
    template_name = 'cardapio/carrinho.html'

    def get(self, request):
        carrinho = GerenciarCarrinhoUseCase(CartManager(request)).obter_carrinho()
        loja = info_loja.obter()
        context = {
            'carrinho': carrinho,
            'taxa_entrega': loja.taxa_entrega,
            'total_com_entrega': total_do_carrinho(carrinho, loja.taxa_entrega),
        }
        return render(request, self.template_name, context)


@require_POST
def remover_do_carrinho(request, item_id):
    try:
        GerenciarCarrinhoUseCase(CartManager(request)).remover_item(item_id)
        messages.success(request, "Item removido do carrinho!")
    except ItemNaoEncontradoError as e:
        messages.error(request, e.message)
    return redirect('carrinho')


@require_POST
def atualizar_quantidade(request, item_id):
    form = QuantidadeItemForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Quantidade inválida.")
        return redirect('carrinho')

    try:
        GerenciarCarrinhoUseCase(CartManager(request)).atualizar_quantidade(
            item_id, form.cleaned_data['quantidade']
        )
    except ItemNaoEncontradoError as e:
        messages.error(request, e.message)
    return redirect('carrinho')


# ====================================================================
# VIEWS PARA CHECKOUT E PEDIDOS DO CLIENTE
# ====================================================================

class ProcessarCheckoutView(LoginRequiredMixin, View):
    """
    Exibe o formulário de endereço (GET) e grava o pedido (POST).
    """
    template_name = 'cardapio/checkout.html'

    def _contexto(self, request, form):
        carrinho = CartManager(request).get_carrinho()
        loja = info_loja.obter()
        return {
            'form': form,
            'carrinho': carrinho,
            'taxa_entrega': loja.taxa_entrega,
            'total_com_entrega': total_do_carrinho(carrinho, loja.taxa_entrega),
        }

    def _nome_inicial(self, request) -> str:
        try:
            perfil = perfil_repo.buscar_por_id(request.user.pk)
        except BackendIndisponivelError:
            perfil = None
        if perfil and perfil.nome:
            return perfil.nome
        return request.user.get_full_name()

    def get(self, request):
        if CartManager(request).is_empty():
            messages.error(request, "Seu carrinho está vazio. Adicione itens para finalizar o pedido.")
            return redirect('carrinho')

        form = CheckoutForm(initial={'nome': self._nome_inicial(request)})
        return render(request, self.template_name, self._contexto(request, form))

    def post(self, request):
        form = CheckoutForm(request.POST)
        if form.is_valid():
            criar_pedido_uc = CriarPedidoUseCase(pedido_repo, CartManager(request), info_loja)
            try:
                pedido = criar_pedido_uc.executar(
                    usuario_id=str(request.user.pk),
                    endereco=form.to_endereco_entity(),
                    nome_cliente=form.cleaned_data['nome'] or None,
                )
            except CarrinhoVazioError as e:
                messages.error(request, e.message)
                return redirect('carrinho')
            except (DadosInvalidosError, BackendIndisponivelError) as e:
                messages.error(request, f"Erro ao finalizar pedido: {e.message}")
            else:
                messages.success(request, f"Pedido #{pedido.codigo_curto} realizado com sucesso!")
                return redirect('detalhe_pedido', pk=pedido.id)

        return render(request, self.template_name, self._contexto(request, form))


class DetalhePedidoView(LoginRequiredMixin, View):
    """
    Confirmação/acompanhamento de um pedido do próprio cliente.
    """
    template_name = 'cardapio/detalhe_pedido.html'

    def get(self, request, pk):
        try:
            pedido = pedido_repo.buscar_por_id(pk)
        except BackendIndisponivelError as e:
            messages.error(request, e.message)
            return redirect('historico_pedidos')

        if not pedido:
            raise Http404("Pedido não encontrado.")

        if pedido.usuario_id != str(request.user.pk) and not request.user.is_staff:
            raise PermissionDenied("Você não tem permissão para visualizar este pedido.")

        return render(request, self.template_name, {'pedido': pedido})


class HistoricoPedidosView(LoginRequiredMixin, View):
    """View para listar o histórico de pedidos do usuário logado."""
    template_name = 'cardapio/meus_pedidos.html'

    def get(self, request):
        uc_listar_pedidos = ListarPedidosDoUsuarioUseCase(pedido_repo)
        try:
            pedidos = uc_listar_pedidos.executar(usuario_id=str(request.user.pk))
        except BaseErroCore as e:
            messages.error(request, f"Erro ao carregar seus pedidos: {e.message}")
            pedidos = []

        return render(request, self.template_name, {'pedidos': pedidos})
