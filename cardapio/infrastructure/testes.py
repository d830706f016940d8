from decimal import Decimal
from io import StringIO
from unittest.mock import MagicMock, PropertyMock, patch

from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError
from django.db.utils import OperationalError
from django.test import TestCase, override_settings

# Importamos as classes que queremos testar
from cardapio.infrastructure.models import (
    Categoria as CategoriaModel,
    OpcaoProduto as OpcaoModel,
    Pedido as PedidoModel,
    Perfil as PerfilModel,
    Produto as ProdutoModel,
    Usuario,
    VariacaoOpcao as VariacaoModel,
)
from cardapio.infrastructure.repositories import (
    CategoriaRepositoryDjango,
    InfoLojaSettings,
    PedidoRepositoryDjango,
    PerfilRepositoryDjango,
    ProdutoRepositoryDjango,
    traduz_erro_backend,
)
from cardapio.core.entities import Endereco, Produto as ProdutoEntity, StatusPedido
from cardapio.core.exceptions import BackendIndisponivelError


# A classe de teste herda do TestCase do Django, que prepara o banco de dados de teste
class ProdutoRepositoryTestCase(TestCase):

    def setUp(self):
        """
        Cria uma categoria, dois produtos (um indisponível) e as opções do lanche.
        """
        self.repository = ProdutoRepositoryDjango()
        self.lanches = CategoriaModel.objects.create(nome='Lanches', ordem=1)
        self.bebidas = CategoriaModel.objects.create(nome='Bebidas', ordem=2)

        self.burger = ProdutoModel.objects.create(
            nome='X-Burger', descricao='Pão, carne e queijo', preco=Decimal('10.00'), categoria=self.lanches,
        )
        self.suco = ProdutoModel.objects.create(
            nome='Suco de Laranja', descricao='Copo 500ml', preco=Decimal('8.00'), categoria=self.bebidas,
            disponivel=False,
        )

        self.adicionais = OpcaoModel.objects.create(produto=self.burger, titulo='Adicionais', max_opcoes=2)
        VariacaoModel.objects.create(opcao=self.adicionais, nome='Ovo', preco=Decimal('2.00'), ordem=2)
        VariacaoModel.objects.create(opcao=self.adicionais, nome='Bacon', preco=Decimal('3.00'), ordem=1)
        OpcaoModel.objects.create(produto=self.burger, titulo='Ponto', obrigatoria=True, ordem=1)

    def test_buscar_por_id_com_sucesso(self):
        """
        Cenário: Verificar se o repositório encontra um produto existente.
        """
        produto = self.repository.buscar_por_id(self.burger.id)

        self.assertIsInstance(produto, ProdutoEntity)
        self.assertEqual(produto.nome, 'X-Burger')
        self.assertEqual(produto.preco, Decimal('10.00'))
        self.assertEqual(produto.categoria, 'Lanches')
        # Sem imagem cadastrada, usa a imagem padrão
        self.assertTrue(produto.imagem.startswith('https://'))

    def test_buscar_por_id_nao_encontrado(self):
        self.assertIsNone(self.repository.buscar_por_id('id-nao-existente'))

    def test_buscar_por_criterios(self):
        self.assertEqual([p.nome for p in self.repository.buscar_por_criterios()], ['X-Burger'])
        self.assertEqual(
            [p.nome for p in self.repository.buscar_por_criterios(apenas_disponiveis=False)],
            ['Suco de Laranja', 'X-Burger'],
        )
        self.assertEqual([p.nome for p in self.repository.buscar_por_criterios(busca='queijo')], ['X-Burger'])
        self.assertEqual(self.repository.buscar_por_criterios(categoria_id=self.bebidas.id), [])

    def test_buscar_opcoes_com_variacoes_ordenadas(self):
        opcoes = self.repository.buscar_opcoes(self.burger.id)

        self.assertEqual([o.titulo for o in opcoes], ['Adicionais', 'Ponto'])
        adicionais, ponto = opcoes
        self.assertEqual([v.nome for v in adicionais.variacoes], ['Bacon', 'Ovo'])
        self.assertTrue(adicionais.multipla_escolha)
        # Obrigatória sem máximo cadastrado vira escolha única
        self.assertEqual(ponto.max_opcoes, 1)
        self.assertEqual(ponto.variacoes, [])

    def test_categorias_na_ordem_de_exibicao(self):
        categorias = CategoriaRepositoryDjango().buscar_todas()
        self.assertEqual([c.nome for c in categorias], ['Lanches', 'Bebidas'])


class PedidoRepositoryTestCase(TestCase):

    def setUp(self):
        self.repository = PedidoRepositoryDjango()
        self.usuario = Usuario.objects.create_user(email='cliente@example.com', password='senha-segura-123')
        self.itens = [{
            'id': 'prod-1-1', 'productId': 'prod-1', 'name': 'X-Burger', 'price': '13.00', 'quantity': 2,
            'image': None, 'selectedOptions': {'Adicionais': ['Bacon']}, 'totalPrice': '26.00',
        }]
        self.endereco = Endereco(
            rua='Rua A', numero='1', bairro='Centro', cidade='Recife', estado='PE', cep='50000000',
        )

    def _criar(self, **kwargs):
        dados = {
            'usuario_id': self.usuario.pk,
            'itens': self.itens,
            'endereco': self.endereco,
            'total': Decimal('26.00'),
            'status': StatusPedido.PENDENTE,
        }
        dados.update(kwargs)
        return self.repository.criar_pedido(**dados)

    def test_criar_pedido_grava_endereco_com_nome_do_cliente(self):
        pedido = self._criar(nome_cliente='Ana')

        model = PedidoModel.objects.get(pk=pedido.id)
        self.assertEqual(model.endereco['street'], 'Rua A')
        self.assertEqual(model.endereco['zipCode'], '50000000')
        self.assertEqual(model.endereco['customer_name'], 'Ana')
        self.assertEqual(model.status, 'pending')

        self.assertEqual(pedido.nome_cliente, 'Ana')
        self.assertEqual(pedido.itens[0].preco_total, Decimal('26.00'))
        self.assertIsNotNone(pedido.criado_em)
        self.assertIsNone(pedido.atualizado_em)

    def test_linha_legada_com_json_em_texto(self):
        """
        Cenário: colunas items/address guardando texto em vez de estrutura.
        """
        model = PedidoModel.objects.create(
            usuario=self.usuario, itens='isto não é json', endereco='{"street": "Rua B", "number": 7}',
            status='delivered', total=Decimal('9.90'),
        )

        pedido = self.repository.buscar_por_id(model.id)

        self.assertEqual(pedido.itens, [])
        self.assertEqual(pedido.endereco.rua, 'Rua B')
        self.assertEqual(pedido.endereco.numero, '7')
        self.assertEqual(pedido.endereco.cidade, '')
        self.assertEqual(pedido.status, StatusPedido.ENTREGUE)

    def test_buscar_por_id_nao_encontrado(self):
        self.assertIsNone(self.repository.buscar_por_id('nao-existe'))

    def test_atualizar_status_mesmo_status(self):
        pedido = self._criar()

        atualizado = self.repository.atualizar_status(pedido.id, StatusPedido.PENDENTE)

        self.assertEqual(atualizado.status, StatusPedido.PENDENTE)
        self.assertEqual(atualizado.total, pedido.total)
        self.assertEqual(atualizado.itens, pedido.itens)
        self.assertIsNotNone(atualizado.atualizado_em)

    def test_atualizar_status_pedido_inexistente(self):
        self.assertIsNone(self.repository.atualizar_status('nao-existe', StatusPedido.CANCELADO))

    def test_listar_pedidos_filtros(self):
        primeiro = self._criar()
        segundo = self._criar(status=StatusPedido.CANCELADO)

        todos = self.repository.listar_todos_pedidos()
        self.assertEqual({p.id for p in todos}, {primeiro.id, segundo.id})
        self.assertEqual([p.id for p in self.repository.listar_todos_pedidos(status='cancelled')], [segundo.id])
        self.assertEqual(
            [p.id for p in self.repository.listar_todos_pedidos(busca=segundo.id[:8].upper())], [segundo.id]
        )
        self.assertEqual(self.repository.listar_todos_pedidos(status='inexistente'), [])
        self.assertEqual(len(self.repository.listar_pedidos_por_usuario(self.usuario.pk)), 2)
        self.assertEqual(self.repository.listar_pedidos_por_usuario('outro-usuario'), [])

    def test_erro_do_banco_vira_backend_indisponivel(self):
        model_mock = MagicMock()
        model_mock.objects.filter.side_effect = DatabaseError('conexão recusada')

        with patch.object(PedidoRepositoryDjango, 'PedidoModel', new_callable=PropertyMock) as prop:
            prop.return_value = model_mock
            with self.assertRaises(BackendIndisponivelError):
                self.repository.listar_pedidos_por_usuario(self.usuario.pk)


class PerfilRepositoryTestCase(TestCase):

    def test_buscar_perfil(self):
        usuario = Usuario.objects.create_user(email='joao@example.com', password='senha-segura-123')
        PerfilModel.objects.create(usuario=usuario, nome='João', telefone='81999990000')

        perfil = PerfilRepositoryDjango().buscar_por_id(usuario.pk)

        self.assertEqual(perfil.id, usuario.pk)
        self.assertEqual(perfil.nome, 'João')
        self.assertEqual(perfil.telefone, '81999990000')

    def test_perfil_inexistente(self):
        self.assertIsNone(PerfilRepositoryDjango().buscar_por_id('sem-perfil'))


class TraducaoErroBackendTestCase(TestCase):

    def test_decorator_preserva_retorno_e_traduz_erro(self):
        @traduz_erro_backend
        def ok():
            return 42

        @traduz_erro_backend
        def falha():
            raise DatabaseError('timeout')

        self.assertEqual(ok(), 42)
        with self.assertRaises(BackendIndisponivelError) as ctx:
            falha()
        self.assertIn('timeout', ctx.exception.message)


class InfoLojaSettingsTestCase(TestCase):

    @override_settings(STORE_NAME='Lanchonete Teste', STORE_PHONE='8133334444', STORE_DELIVERY_FEE='4.50')
    def test_le_dados_da_loja(self):
        loja = InfoLojaSettings().obter()

        self.assertEqual(loja.nome, 'Lanchonete Teste')
        self.assertEqual(loja.telefone, '8133334444')
        self.assertEqual(loja.taxa_entrega, Decimal('4.50'))


class ComandosTestCase(TestCase):

    def test_load_initial_data_e_idempotente(self):
        call_command('load_initial_data', stdout=StringIO())
        produtos = ProdutoModel.objects.count()
        opcoes = OpcaoModel.objects.count()

        call_command('load_initial_data', stdout=StringIO())

        self.assertGreater(produtos, 0)
        self.assertEqual(ProdutoModel.objects.count(), produtos)
        self.assertEqual(OpcaoModel.objects.count(), opcoes)
        self.assertTrue(CategoriaModel.objects.filter(nome='Lanches').exists())

    def test_wait_for_db_banco_disponivel(self):
        saida = StringIO()
        call_command('wait_for_db', stdout=saida)
        self.assertIn('Banco de dados disponível', saida.getvalue())

    @patch('cardapio.core.management.commands.wait_for_db.time.sleep')
    @patch('cardapio.core.management.commands.wait_for_db.connections')
    def test_wait_for_db_desiste_apos_tentativas(self, connections_mock, sleep_mock):
        connections_mock.__getitem__.return_value.ensure_connection.side_effect = OperationalError

        with self.assertRaises(CommandError):
            call_command('wait_for_db', tentativas=3, intervalo=0, stdout=StringIO())
        self.assertEqual(sleep_mock.call_count, 3)
