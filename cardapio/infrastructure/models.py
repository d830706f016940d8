# Define os modelos do banco de dados (as tabelas do backend gerenciado).

import uuid

from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.conf import settings

from cardapio.core.entities import StatusPedido


def gerar_uuid() -> str:
    return str(uuid.uuid4())


# ====================================================================
# GERENCIADOR DE USUÁRIOS PERSONALIZADO (Para usar email como login)
# ====================================================================

class CustomUserManager(BaseUserManager):
    """
    Gerenciador de modelos de usuário onde o email é o identificador único
    para autenticação, em vez dos nomes de usuário.
    """
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('O e-mail deve ser definido')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Cria e salva um Superusuário com o e-mail e senha fornecidos.
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


# ====================================================================
# USUÁRIO E PERFIL
# ====================================================================

class Usuario(AbstractUser):
    """
    Modelo de Usuário Personalizado que utiliza o campo 'email' como identificador
    principal para login, em vez de 'username'.
    """
    id = models.CharField(primary_key=True, max_length=36, default=gerar_uuid, editable=False)
    username = None

    email = models.EmailField('Endereço de E-mail', unique=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name']

    objects = CustomUserManager()

    class Meta:
        verbose_name = 'Usuário'
        verbose_name_plural = 'Usuários'
        db_table = 'auth_usuario'

    def __str__(self):
        return self.email


class Perfil(models.Model):
    """Dados de contato do cliente. A chave é o próprio id do usuário."""
    usuario = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        primary_key=True,
        on_delete=models.CASCADE,
        db_column='id',
        related_name='perfil',
    )
    nome = models.CharField(max_length=255, blank=True, db_column='name')
    telefone = models.CharField(max_length=20, blank=True, db_column='phone')
    email = models.EmailField(blank=True, db_column='email')

    class Meta:
        verbose_name = 'Perfil'
        verbose_name_plural = 'Perfis'
        db_table = 'profiles'

    def __str__(self):
        return self.nome or self.email


# ====================================================================
# CARDÁPIO
# ====================================================================

class Categoria(models.Model):
    """Agrupa os produtos do cardápio (Ex: Lanches, Bebidas)."""
    nome = models.CharField(max_length=100, unique=True, db_column='name', verbose_name="Nome da Categoria")
    ordem = models.PositiveIntegerField(default=0, db_column='position')

    class Meta:
        verbose_name = "Categoria"
        verbose_name_plural = "Categorias"
        db_table = 'categories'
        ordering = ['ordem', 'nome']

    def __str__(self):
        return self.nome


class Produto(models.Model):
    """Produto do cardápio."""
    id = models.CharField(primary_key=True, max_length=36, default=gerar_uuid, editable=False)
    categoria = models.ForeignKey(
        Categoria, on_delete=models.SET_NULL, null=True, blank=True,
        db_column='category_id', related_name='produtos',
    )
    nome = models.CharField(max_length=255, db_column='name', verbose_name="Nome do Produto")
    descricao = models.TextField(blank=True, db_column='description', verbose_name="Descrição")
    preco = models.DecimalField(max_digits=10, decimal_places=2, db_column='price', verbose_name="Preço")
    imagem_url = models.URLField(max_length=500, blank=True, db_column='image_url')
    disponivel = models.BooleanField(default=True, db_column='available')
    criado_em = models.DateTimeField(auto_now_add=True, db_column='created_at')

    class Meta:
        verbose_name = "Produto"
        verbose_name_plural = "Produtos"
        db_table = 'products'
        ordering = ['nome']

    def __str__(self):
        return self.nome


class OpcaoProduto(models.Model):
    """Grupo de escolha de um produto (Ex: Tamanho, Adicionais)."""
    id = models.CharField(primary_key=True, max_length=36, default=gerar_uuid, editable=False)
    produto = models.ForeignKey(
        Produto, on_delete=models.CASCADE, db_column='product_id', related_name='opcoes',
    )
    titulo = models.CharField(max_length=100, db_column='title')
    obrigatoria = models.BooleanField(default=False, db_column='required')
    max_opcoes = models.PositiveIntegerField(
        null=True, blank=True, db_column='max_options',
        help_text='Vazio: 1 para opções obrigatórias, escolha única para as demais.',
    )
    ordem = models.PositiveIntegerField(default=0, db_column='position')

    class Meta:
        verbose_name = "Opção do Produto"
        verbose_name_plural = "Opções do Produto"
        db_table = 'product_options'
        ordering = ['ordem', 'titulo']

    def __str__(self):
        return f"{self.produto.nome} - {self.titulo}"


class VariacaoOpcao(models.Model):
    """Valor selecionável de uma opção, com acréscimo de preço."""
    id = models.CharField(primary_key=True, max_length=36, default=gerar_uuid, editable=False)
    opcao = models.ForeignKey(
        OpcaoProduto, on_delete=models.CASCADE, db_column='option_id', related_name='variacoes',
    )
    nome = models.CharField(max_length=100, db_column='name')
    preco = models.DecimalField(max_digits=10, decimal_places=2, default=0, db_column='price')
    ordem = models.PositiveIntegerField(default=0, db_column='position')

    class Meta:
        verbose_name = "Variação"
        verbose_name_plural = "Variações"
        db_table = 'option_variations'
        ordering = ['ordem', 'nome']

    def __str__(self):
        return self.nome


# ====================================================================
# PEDIDOS
# ====================================================================

class Pedido(models.Model):
    """
    Pedido gravado no checkout. `itens` e `endereco` são JSON livres:
    linhas antigas podem conter texto serializado em vez de estrutura.
    """
    id = models.CharField(primary_key=True, max_length=36, default=gerar_uuid, editable=False)
    usuario = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        db_column='user_id', related_name='pedidos',
    )
    itens = models.JSONField(default=list, blank=True, db_column='items')
    endereco = models.JSONField(null=True, blank=True, db_column='address')
    status = models.CharField(
        max_length=20, choices=StatusPedido.choices(), default=StatusPedido.PENDENTE.value,
    )
    total = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    criado_em = models.DateTimeField(auto_now_add=True, db_column='created_at')
    atualizado_em = models.DateTimeField(null=True, blank=True, db_column='updated_at')

    class Meta:
        verbose_name = 'Pedido'
        verbose_name_plural = 'Pedidos'
        db_table = 'orders'
        ordering = ['-criado_em']

    def __str__(self):
        return f"Pedido #{self.id[:8]}"
