# cardapio/presentation/views_auth.py
"""
Views para autenticação de usuários.
"""

from django.views import View
from django.shortcuts import render, redirect
from django.contrib.auth import authenticate, login, logout
from django.contrib import messages
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from .forms import LoginForm


class LoginView(View):
    """
    View para a página de login (e-mail e senha).
    """
    template_name = 'cardapio/login.html'

    def _destino(self, request):
        destino = request.POST.get('next') or request.GET.get('next')
        if destino and url_has_allowed_host_and_scheme(destino, allowed_hosts={request.get_host()}):
            return destino
        return 'cardapio'

    def get(self, request):
        context = {'form': LoginForm(), 'next': request.GET.get('next', '')}
        return render(request, self.template_name, context)

    def post(self, request):
        form = LoginForm(request.POST)
        if form.is_valid():
            user = authenticate(
                request,
                username=form.cleaned_data['email'],
                password=form.cleaned_data['password'],
            )
            if user is not None:
                login(request, user)
                messages.success(request, f'Bem-vindo(a), {user.first_name or user.email}!')
                return redirect(self._destino(request))
            messages.error(request, 'E-mail ou senha inválidos.')

        context = {'form': form, 'next': request.POST.get('next', '')}
        return render(request, self.template_name, context)


@require_POST
def logout_usuario(request):
    """
    View para a saída do usuário.
    """
    logout(request)
    messages.info(request, "Você saiu do sistema.")
    return redirect('cardapio')
