# cardapio/presentation/views_admin.py
"""
Views para o painel de pedidos (equipe da loja).
"""
import logging

from django.views.generic import View
from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import PermissionDenied
from django.shortcuts import render, redirect
from django.contrib import messages
from django.http import Http404

from cardapio.core.use_cases import GerenciarPedidosAdminUseCase
from cardapio.core.exceptions import (
    BackendIndisponivelError,
    PedidoNaoEncontradoError,
    StatusInvalidoError,
)
from cardapio.infrastructure.instances import pedido_repo, perfil_repo

from .forms import FiltroPedidosForm, StatusPedidoForm

logger = logging.getLogger(__name__)


class ApenasEquipeMixin(LoginRequiredMixin):
    """Exige login e usuário is_staff."""

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()
        if not request.user.is_staff:
            raise PermissionDenied("Você não tem permissão para acessar esta página.")
        return super().dispatch(request, *args, **kwargs)


def _use_case():
    return GerenciarPedidosAdminUseCase(pedido_repo=pedido_repo, perfil_repo=perfil_repo)


# ====================================================================
# GERENCIAMENTO DE PEDIDOS
# ====================================================================

class GerenciarPedidosView(ApenasEquipeMixin, View):
    """
    Listagem de pedidos (mais recentes primeiro) com filtro por status
    e busca por trecho do ID.
    """
    template_name = 'painel/pedidos.html'

    def get(self, request):
        filtro = FiltroPedidosForm(request.GET or None)
        status_filtro = request.GET.get('status', GerenciarPedidosAdminUseCase.FILTRO_TODOS)
        busca = request.GET.get('busca', '')

        try:
            pedidos = _use_case().listar_todos(status=status_filtro, busca=busca)
        except BackendIndisponivelError as e:
            logger.exception("Erro ao listar pedidos")
            messages.error(request, f"Erro ao carregar pedidos: {e.message}")
            pedidos = []

        context = {
            'pedidos': pedidos,
            'filtro': filtro,
            'status_selecionado': status_filtro,
            'busca': busca,
        }
        return render(request, self.template_name, context)


class DetalhePedidoAdminView(ApenasEquipeMixin, View):
    """
    Detalhe do pedido no painel: itens, endereço, cliente e formulário de status.
    """
    template_name = 'painel/detalhe_pedido.html'

    def get(self, request, pk):
        try:
            pedido = _use_case().detalhar_pedido(pk)
        except PedidoNaoEncontradoError:
            raise Http404("Pedido não encontrado.")
        except BackendIndisponivelError as e:
            messages.error(request, f"Erro ao carregar o pedido: {e.message}")
            return redirect('gerenciar_pedidos')

        status_atual = getattr(pedido.status, 'value', pedido.status)
        context = {
            'pedido': pedido,
            'form': StatusPedidoForm(initial={'status': status_atual}),
        }
        return render(request, self.template_name, context)


class AtualizarStatusPedidoView(ApenasEquipeMixin, View):
    """
    Escrita direta do status. Qualquer status pode ser escolhido.
    """
    def post(self, request, pk):
        form = StatusPedidoForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Status inválido.")
            return redirect('admin_detalhe_pedido', pk=pk)

        try:
            pedido = _use_case().atualizar_status(pedido_id=pk, novo_status=form.cleaned_data['status'])
            messages.success(
                request, f"Status do Pedido #{pedido.codigo_curto} atualizado para {pedido.status_label}."
            )
        except PedidoNaoEncontradoError:
            raise Http404("Pedido não encontrado.")
        except (StatusInvalidoError, BackendIndisponivelError) as e:
            messages.error(request, f"Erro ao atualizar status: {e.message}")

        return redirect('admin_detalhe_pedido', pk=pk)
