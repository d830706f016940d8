# cardapio/presentation/forms.py

from typing import Dict, List

from django import forms

from cardapio.core import precificacao
from cardapio.core.entities import Endereco, StatusPedido
from cardapio.core.exceptions import SelecaoInvalidaError
from cardapio.core.use_cases import GerenciarPedidosAdminUseCase

# --- 1. FORMULÁRIOS DE AUTENTICAÇÃO ---

class LoginForm(forms.Form):
    """
    Formulário simples para login (o e-mail é o identificador do usuário).
    """
    email = forms.EmailField(
        label="E-mail",
        widget=forms.EmailInput(attrs={'placeholder': 'Seu e-mail'})
    )
    password = forms.CharField(
        label="Senha",
        widget=forms.PasswordInput(attrs={'placeholder': 'Sua senha'})
    )
    # A autenticação (authenticate/login) é feita na View


# --- 2. FORMULÁRIOS DO CARDÁPIO E CARRINHO ---

def _rotulo_variacao(variacao) -> str:
    if variacao.preco:
        return f"{variacao.nome} (+ R$ {variacao.preco:.2f})"
    return variacao.nome


class AdicionarItemCarrinhoForm(forms.Form):
    """
    Formulário da página do produto. Recebe as opções do produto e cria um
    campo `opcao_<id>` para cada uma: radio para escolha única, checkboxes
    quando a opção aceita mais de uma variação.
    """
    quantidade = forms.IntegerField(
        min_value=1,
        initial=1,
        widget=forms.NumberInput(attrs={'min': '1', 'step': '1'})
    )

    PREFIXO = 'opcao_'

    def __init__(self, *args, opcoes=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.opcoes = list(opcoes or [])

        for opcao in self.opcoes:
            choices = [(v.id, _rotulo_variacao(v)) for v in opcao.variacoes]
            if opcao.multipla_escolha:
                field = forms.MultipleChoiceField(
                    choices=choices,
                    required=opcao.obrigatoria,
                    widget=forms.CheckboxSelectMultiple,
                    help_text=f"Escolha até {opcao.limite_selecoes}",
                )
            else:
                field = forms.ChoiceField(
                    choices=choices,
                    required=opcao.obrigatoria,
                    widget=forms.RadioSelect,
                )
            field.label = opcao.titulo
            self.fields[self.nome_campo(opcao)] = field

    @classmethod
    def nome_campo(cls, opcao) -> str:
        return f"{cls.PREFIXO}{opcao.id}"

    def selecoes(self) -> Dict[str, List[str]]:
        """{id da opção: [ids das variações]} a partir dos dados validados."""
        resultado = {}
        for opcao in self.opcoes:
            valor = self.cleaned_data.get(self.nome_campo(opcao))
            if not valor:
                continue
            resultado[str(opcao.id)] = list(valor) if isinstance(valor, (list, tuple)) else [valor]
        return resultado

    def clean(self):
        cleaned_data = super().clean()
        if self.errors:
            return cleaned_data
        try:
            precificacao.validar_selecoes(self.selecoes(), self.opcoes)
        except SelecaoInvalidaError as e:
            opcao = next((o for o in self.opcoes if o.titulo == e.opcao_titulo), None)
            self.add_error(self.nome_campo(opcao) if opcao else None, e.message)
        return cleaned_data


class QuantidadeItemForm(forms.Form):
    """Atualização de quantidade na página do carrinho. Zero remove o item."""
    quantidade = forms.IntegerField(min_value=0)


# --- 3. FORMULÁRIOS DE CHECKOUT ---

class CheckoutForm(forms.Form):
    """
    Formulário para finalização do pedido no checkout (endereço de entrega).
    """
    nome = forms.CharField(label="Nome para o pedido", max_length=255, required=False)
    rua = forms.CharField(label="Rua", max_length=255)
    numero = forms.CharField(label="Número", max_length=20)
    bairro = forms.CharField(label="Bairro", max_length=100)
    cidade = forms.CharField(label="Cidade", max_length=100)
    estado = forms.CharField(label="Estado", max_length=2, required=False)
    cep = forms.CharField(label="CEP", max_length=9, required=False)

    def clean_cep(self):
        cep = self.cleaned_data['cep'].replace('-', '').strip()
        if cep and (not cep.isdigit() or len(cep) != 8):
            raise forms.ValidationError("O CEP deve conter 8 dígitos.")
        return cep

    def clean_estado(self):
        return self.cleaned_data['estado'].upper()

    def to_endereco_entity(self) -> Endereco:
        return Endereco(**{campo: self.cleaned_data.get(campo, '') for campo in Endereco.CHAVES})


# --- 4. FORMULÁRIOS ADMINISTRATIVOS ---

class StatusPedidoForm(forms.Form):
    """Seleção do novo status no detalhe do pedido (painel)."""
    status = forms.ChoiceField(label="Status do pedido", choices=StatusPedido.choices())


class FiltroPedidosForm(forms.Form):
    """Filtro de status e busca por ID na listagem de pedidos do painel."""
    status = forms.ChoiceField(
        choices=[(GerenciarPedidosAdminUseCase.FILTRO_TODOS, 'Todos')] + StatusPedido.choices(),
        required=False,
    )
    busca = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={'placeholder': 'Buscar por ID do pedido'})
    )
