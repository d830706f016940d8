# Configuração da interface administrativa do Django para os modelos do Cardápio.

from django import forms
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import UserChangeForm, UserCreationForm
from django.utils import timezone

from cardapio.infrastructure.models import (
    Categoria, OpcaoProduto, Pedido, Perfil, Produto, Usuario, VariacaoOpcao,
)

# ====================================================================
# 1. ADMIN PERSONALIZADO PARA USUÁRIOS (login por e-mail)
# ====================================================================

class UsuarioCreationForm(UserCreationForm):
    class Meta:
        model = Usuario
        fields = ('email', 'first_name')


class UsuarioChangeForm(UserChangeForm):
    class Meta:
        model = Usuario
        fields = '__all__'


class PerfilInline(admin.StackedInline):
    """Dados de contato (tabela profiles) na página do usuário."""
    model = Perfil
    can_delete = False
    extra = 0


@admin.register(Usuario)
class UsuarioAdmin(BaseUserAdmin):
    form = UsuarioChangeForm
    add_form = UsuarioCreationForm
    inlines = [PerfilInline]

    list_display = ('email', 'first_name', 'last_name', 'is_staff', 'is_active')

    # O campo 'username' não existe no modelo Usuario
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Informações Pessoais', {'fields': ('first_name', 'last_name')}),
        ('Permissões', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Datas', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'first_name', 'password1', 'password2'),
        }),
    )
    search_fields = ('email', 'first_name', 'last_name')
    ordering = ('email',)


# ====================================================================
# 2. ADMIN DO CARDÁPIO
# ====================================================================

@admin.register(Categoria)
class CategoriaAdmin(admin.ModelAdmin):
    list_display = ('nome', 'ordem')
    list_editable = ('ordem',)
    search_fields = ('nome',)


class OpcaoProdutoInline(admin.TabularInline):
    """Opções editáveis diretamente na página do Produto."""
    model = OpcaoProduto
    extra = 0
    show_change_link = True


@admin.register(Produto)
class ProdutoAdmin(admin.ModelAdmin):
    list_display = ('nome', 'preco', 'categoria', 'disponivel', 'criado_em')
    list_filter = ('disponivel', 'categoria')
    search_fields = ('nome', 'descricao', 'id')
    ordering = ('nome',)
    inlines = [OpcaoProdutoInline]
    fieldsets = (
        ('Informações Básicas', {
            'fields': ('nome', 'descricao', 'preco', 'disponivel', 'imagem_url')
        }),
        ('Classificação', {
            'fields': ('categoria',),
        }),
    )


class VariacaoOpcaoInline(admin.TabularInline):
    model = VariacaoOpcao
    extra = 1


@admin.register(OpcaoProduto)
class OpcaoProdutoAdmin(admin.ModelAdmin):
    list_display = ('titulo', 'produto', 'obrigatoria', 'max_opcoes')
    list_filter = ('obrigatoria',)
    search_fields = ('titulo', 'produto__nome')
    inlines = [VariacaoOpcaoInline]


# ====================================================================
# 3. ADMIN PARA PEDIDOS
# ====================================================================

class PedidoAdminForm(forms.ModelForm):
    class Meta:
        model = Pedido
        fields = ('status',)


@admin.register(Pedido)
class PedidoAdmin(admin.ModelAdmin):
    form = PedidoAdminForm
    list_display = ('id', 'usuario', 'criado_em', 'total', 'status')
    list_filter = ('status', 'criado_em')
    search_fields = ('id', 'usuario__email')
    date_hierarchy = 'criado_em'
    readonly_fields = ('usuario', 'criado_em', 'atualizado_em', 'total', 'itens', 'endereco')

    def save_model(self, request, obj, form, change):
        """O administrador altera apenas o status; a data de atualização acompanha."""
        if change and 'status' in form.changed_data:
            obj.atualizado_em = timezone.now()
        super().save_model(request, obj, form, change)

    def has_add_permission(self, request):
        """Pedidos são criados apenas pelo checkout."""
        return False
