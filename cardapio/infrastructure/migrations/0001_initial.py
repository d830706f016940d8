import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import cardapio.infrastructure.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='Usuario',
            fields=[
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('id', models.CharField(default=cardapio.infrastructure.models.gerar_uuid, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('email', models.EmailField(max_length=254, unique=True, verbose_name='Endereço de E-mail')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'Usuário',
                'verbose_name_plural': 'Usuários',
                'db_table': 'auth_usuario',
            },
        ),
        migrations.CreateModel(
            name='Categoria',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nome', models.CharField(db_column='name', max_length=100, unique=True, verbose_name='Nome da Categoria')),
                ('ordem', models.PositiveIntegerField(db_column='position', default=0)),
            ],
            options={
                'verbose_name': 'Categoria',
                'verbose_name_plural': 'Categorias',
                'db_table': 'categories',
                'ordering': ['ordem', 'nome'],
            },
        ),
        migrations.CreateModel(
            name='Produto',
            fields=[
                ('id', models.CharField(default=cardapio.infrastructure.models.gerar_uuid, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('nome', models.CharField(db_column='name', max_length=255, verbose_name='Nome do Produto')),
                ('descricao', models.TextField(blank=True, db_column='description', verbose_name='Descrição')),
                ('preco', models.DecimalField(db_column='price', decimal_places=2, max_digits=10, verbose_name='Preço')),
                ('imagem_url', models.URLField(blank=True, db_column='image_url', max_length=500)),
                ('disponivel', models.BooleanField(db_column='available', default=True)),
                ('criado_em', models.DateTimeField(auto_now_add=True, db_column='created_at')),
                ('categoria', models.ForeignKey(blank=True, db_column='category_id', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='produtos', to='infrastructure.categoria')),
            ],
            options={
                'verbose_name': 'Produto',
                'verbose_name_plural': 'Produtos',
                'db_table': 'products',
                'ordering': ['nome'],
            },
        ),
        migrations.CreateModel(
            name='OpcaoProduto',
            fields=[
                ('id', models.CharField(default=cardapio.infrastructure.models.gerar_uuid, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('titulo', models.CharField(db_column='title', max_length=100)),
                ('obrigatoria', models.BooleanField(db_column='required', default=False)),
                ('max_opcoes', models.PositiveIntegerField(blank=True, db_column='max_options', help_text='Vazio: 1 para opções obrigatórias, escolha única para as demais.', null=True)),
                ('ordem', models.PositiveIntegerField(db_column='position', default=0)),
                ('produto', models.ForeignKey(db_column='product_id', on_delete=django.db.models.deletion.CASCADE, related_name='opcoes', to='infrastructure.produto')),
            ],
            options={
                'verbose_name': 'Opção do Produto',
                'verbose_name_plural': 'Opções do Produto',
                'db_table': 'product_options',
                'ordering': ['ordem', 'titulo'],
            },
        ),
        migrations.CreateModel(
            name='VariacaoOpcao',
            fields=[
                ('id', models.CharField(default=cardapio.infrastructure.models.gerar_uuid, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('nome', models.CharField(db_column='name', max_length=100)),
                ('preco', models.DecimalField(db_column='price', decimal_places=2, default=0, max_digits=10)),
                ('ordem', models.PositiveIntegerField(db_column='position', default=0)),
                ('opcao', models.ForeignKey(db_column='option_id', on_delete=django.db.models.deletion.CASCADE, related_name='variacoes', to='infrastructure.opcaoproduto')),
            ],
            options={
                'verbose_name': 'Variação',
                'verbose_name_plural': 'Variações',
                'db_table': 'option_variations',
                'ordering': ['ordem', 'nome'],
            },
        ),
        migrations.CreateModel(
            name='Perfil',
            fields=[
                ('usuario', models.OneToOneField(db_column='id', on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='perfil', serialize=False, to=settings.AUTH_USER_MODEL)),
                ('nome', models.CharField(blank=True, db_column='name', max_length=255)),
                ('telefone', models.CharField(blank=True, db_column='phone', max_length=20)),
                ('email', models.EmailField(blank=True, db_column='email', max_length=254)),
            ],
            options={
                'verbose_name': 'Perfil',
                'verbose_name_plural': 'Perfis',
                'db_table': 'profiles',
            },
        ),
        migrations.CreateModel(
            name='Pedido',
            fields=[
                ('id', models.CharField(default=cardapio.infrastructure.models.gerar_uuid, editable=False, max_length=36, primary_key=True, serialize=False)),
                ('itens', models.JSONField(blank=True, db_column='items', default=list)),
                ('endereco', models.JSONField(blank=True, db_column='address', null=True)),
                ('status', models.CharField(choices=[('pending', 'Pendente'), ('processing', 'Em preparação'), ('delivering', 'Em entrega'), ('delivered', 'Entregue'), ('cancelled', 'Cancelado'), ('awaiting_payment', 'Aguardando pagamento')], default='pending', max_length=20)),
                ('total', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('criado_em', models.DateTimeField(auto_now_add=True, db_column='created_at')),
                ('atualizado_em', models.DateTimeField(blank=True, db_column='updated_at', null=True)),
                ('usuario', models.ForeignKey(blank=True, db_column='user_id', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='pedidos', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Pedido',
                'verbose_name_plural': 'Pedidos',
                'db_table': 'orders',
                'ordering': ['-criado_em'],
            },
        ),
    ]
