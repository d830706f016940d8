# cardapio/core/testes.py

import json
import unittest
from unittest.mock import Mock
from decimal import Decimal

# Importamos as classes que queremos testar
from cardapio.core import precificacao
from cardapio.core.entities import (
    Carrinho, Endereco, InfoLoja, ItemCarrinho, OpcaoProduto, Pedido, Perfil, Produto, StatusPedido, Variacao,
)
from cardapio.core.exceptions import (
    CarrinhoVazioError,
    DadosInvalidosError,
    PedidoNaoEncontradoError,
    ProdutoNaoEncontradoError,
    SelecaoInvalidaError,
    StatusInvalidoError,
)
from cardapio.core.normalizacao import (
    normalizar_endereco,
    normalizar_itens,
    normalizar_opcao,
    normalizar_pedido,
    normalizar_produto,
)
from cardapio.core.use_cases import (
    CotarProdutoUseCase,
    CriarPedidoUseCase,
    DetalharProdutoUseCase,
    GerenciarCarrinhoUseCase,
    GerenciarPedidosAdminUseCase,
    ListarCardapioUseCase,
)
from cardapio.infrastructure.repositories import (
    CategoriaRepository,
    PedidoRepository,
    PerfilRepository,
    ProdutoRepository,
)


ENDERECO_VAZIO = {
    'rua': '', 'numero': '', 'bairro': '', 'cidade': '', 'estado': '', 'cep': '',
}

JSON_PROFUNDO = '[' * 100000 + ']' * 100000


def _endereco_completo():
    return Endereco(
        rua='Rua das Flores', numero='10', bairro='Centro',
        cidade='Recife', estado='PE', cep='50000000',
    )


class CarrinhoEmMemoria:
    """Armazenamento simples do carrinho para os testes (sem sessão)."""

    def __init__(self, itens=None):
        self.carrinho = Carrinho(itens=list(itens or []))

    def get_carrinho(self):
        return self.carrinho

    def add_item(self, item):
        self.carrinho.itens.append(item)
        return self.carrinho

    def remove_item(self, item_id):
        self.carrinho.itens = [i for i in self.carrinho.itens if i.id != item_id]
        return self.carrinho

    def update_quantity(self, item_id, quantidade):
        item = self.carrinho.get_item(item_id)
        item.quantidade = quantidade
        item.preco_total = item.preco * quantidade
        return self.carrinho

    def clear_carrinho(self):
        self.carrinho = Carrinho()


# ====================================================================
# NORMALIZAÇÃO
# ====================================================================

class TestNormalizarEndereco(unittest.TestCase):

    def test_endereco_ausente_tem_os_seis_campos(self):
        for raw in (None, '', {}, []):
            endereco = normalizar_endereco(raw)
            self.assertEqual(vars(endereco), ENDERECO_VAZIO)

    def test_endereco_json_invalido_vira_formato_padrao(self):
        """
        Cenário: a coluna address contém texto que não é JSON.
        """
        endereco = normalizar_endereco('{rua: sem aspas')
        self.assertEqual(vars(endereco), ENDERECO_VAZIO)

    def test_endereco_json_que_nao_e_objeto(self):
        self.assertEqual(vars(normalizar_endereco('[1, 2, 3]')), ENDERECO_VAZIO)
        self.assertEqual(vars(normalizar_endereco(42)), ENDERECO_VAZIO)

    def test_endereco_json_aninhado_demais(self):
        """
        Cenário: texto JSON tão aninhado que o decodificador estoura a recursão.
        """
        self.assertEqual(vars(normalizar_endereco(JSON_PROFUNDO)), ENDERECO_VAZIO)
        self.assertEqual(vars(normalizar_endereco('{"a": ' * 100000 + '1' + '}' * 100000)), ENDERECO_VAZIO)

    def test_endereco_parcial_completa_com_vazio(self):
        endereco = normalizar_endereco(json.dumps({'street': 'Rua A', 'number': 12, 'city': None}))

        self.assertEqual(endereco.rua, 'Rua A')
        self.assertEqual(endereco.numero, '12')
        self.assertEqual(endereco.cidade, '')
        self.assertEqual(endereco.cep, '')

    def test_endereco_ja_estruturado(self):
        endereco = normalizar_endereco({
            'street': 'Rua B', 'number': '5', 'neighborhood': 'Boa Vista',
            'city': 'Olinda', 'state': 'PE', 'zipCode': '53000000',
        })
        self.assertEqual(endereco.formatar_endereco_texto(), 'Rua B, 5 - Boa Vista - Olinda/PE - CEP: 53000000')


class TestNormalizarItens(unittest.TestCase):

    def test_itens_malformados_viram_lista_vazia(self):
        for raw in (None, '', 'não é json', '{"a": 1}', 10, {'productId': 'x'}):
            self.assertEqual(normalizar_itens(raw), [], msg=repr(raw))

    def test_itens_em_texto_json(self):
        itens = normalizar_itens('[{"productId": "p1", "quantity": 2}]')
        self.assertEqual(itens, [{'productId': 'p1', 'quantity': 2}])

    def test_itens_ja_estruturados(self):
        self.assertEqual(normalizar_itens([{'name': 'X'}]), [{'name': 'X'}])

    def test_itens_json_aninhado_demais(self):
        self.assertEqual(normalizar_itens(JSON_PROFUNDO), [])


class TestNormalizarPedido(unittest.TestCase):

    def test_linha_com_campos_ruins_usa_padroes(self):
        pedido = normalizar_pedido({
            'id': 'abcdef1234567890',
            'user_id': None,
            'status': 'on_the_moon',
            'total': 'abc',
            'items': '{quebrado',
            'address': 'também quebrado',
        })

        self.assertEqual(pedido.total, Decimal('0'))
        self.assertEqual(pedido.itens, [])
        self.assertEqual(vars(pedido.endereco), ENDERECO_VAZIO)
        self.assertEqual(pedido.status_label, 'Desconhecido')
        self.assertEqual(pedido.codigo_curto, 'abcdef12')

    def test_itens_camel_case_e_nome_do_cliente(self):
        pedido = normalizar_pedido({
            'id': 'p-1',
            'user_id': 'u-1',
            'status': 'delivering',
            'total': '26.00',
            'items': [{
                'productId': 'prod-101', 'name': 'X-Burger', 'price': '13.00',
                'quantity': 2, 'selectedOptions': {'Adicionais': ['Bacon']}, 'totalPrice': '26.00',
            }],
            'address': {'street': 'Rua A', 'customer_name': 'Maria'},
        })

        self.assertEqual(pedido.status, StatusPedido.EM_ENTREGA)
        self.assertEqual(pedido.quantidade_itens, 1)
        item = pedido.itens[0]
        self.assertEqual(item.produto_id, 'prod-101')
        self.assertEqual(item.preco_total, Decimal('26.00'))
        self.assertEqual(item.opcoes_selecionadas, {'Adicionais': ['Bacon']})
        self.assertEqual(pedido.nome_cliente, 'Maria')
        self.assertEqual(pedido.cliente, 'Maria')

    def test_quantidade_invalida_vira_um(self):
        pedido = normalizar_pedido({'id': 'p', 'items': [{'price': '4.00', 'quantity': 'duas'}]})
        self.assertEqual(pedido.itens[0].quantidade, 1)
        self.assertEqual(pedido.itens[0].preco_total, Decimal('4.00'))

    def test_linha_com_json_aninhado_demais(self):
        pedido = normalizar_pedido({'id': 'p', 'items': JSON_PROFUNDO, 'address': JSON_PROFUNDO})

        self.assertEqual(pedido.itens, [])
        self.assertEqual(vars(pedido.endereco), ENDERECO_VAZIO)
        self.assertIsNone(pedido.nome_cliente)

    def test_valores_nao_finitos_ou_enormes_viram_zero(self):
        pedido = normalizar_pedido({
            'id': 'p',
            'total': 'Infinity',
            'items': [
                {'price': 'NaN', 'quantity': 1, 'totalPrice': '-Infinity'},
                {'price': '1e40', 'quantity': 2},
                {'price': '1e12', 'quantity': 1},
            ],
        })

        self.assertEqual(pedido.total, Decimal('0'))
        nan, enorme, grande = pedido.itens
        self.assertEqual((nan.preco_unitario, nan.preco_total), (Decimal('0'), Decimal('0')))
        self.assertEqual((enorme.preco_unitario, enorme.preco_total), (Decimal('0'), Decimal('0')))
        self.assertEqual(grande.preco_total, Decimal('1e12'))

    def test_opcao_selecionada_nula_vira_lista_vazia(self):
        pedido = normalizar_pedido({
            'id': 'p',
            'items': [{'price': '5.00', 'selectedOptions': {'Molho': None, 'Adicionais': ['Bacon', None]}}],
        })
        self.assertEqual(pedido.itens[0].opcoes_selecionadas, {'Molho': [], 'Adicionais': ['Bacon']})


class TestNormalizarCatalogo(unittest.TestCase):

    def test_produto_sem_imagem_e_categoria(self):
        produto = normalizar_produto({'id': 1, 'name': 'Suco', 'price': '9.00'})

        self.assertEqual(produto.id, '1')
        self.assertEqual(produto.preco, Decimal('9.00'))
        self.assertEqual(produto.categoria, 'Sem categoria')
        self.assertTrue(produto.imagem.startswith('https://'))

    def test_opcao_obrigatoria_sem_maximo_vira_escolha_unica(self):
        opcao = normalizar_opcao(
            {'id': 'o1', 'title': 'Tamanho', 'required': True, 'max_options': None},
            [{'id': 'v1', 'name': 'Grande', 'price': 'abc'}],
        )

        self.assertEqual(opcao.max_opcoes, 1)
        self.assertFalse(opcao.multipla_escolha)
        self.assertEqual(opcao.variacoes[0].preco, Decimal('0'))

    def test_opcao_opcional_sem_maximo(self):
        opcao = normalizar_opcao({'id': 'o2', 'title': 'Borda'}, [])
        self.assertIsNone(opcao.max_opcoes)
        self.assertEqual(opcao.limite_selecoes, 1)


# ====================================================================
# PRECIFICAÇÃO
# ====================================================================

class TestPrecificacao(unittest.TestCase):

    def setUp(self):
        self.opcoes = [
            OpcaoProduto(
                id='op-1', titulo='Adicionais', max_opcoes=3,
                variacoes=[
                    Variacao(id='var-1', nome='Bacon', preco=Decimal('3.00')),
                    Variacao(id='var-2', nome='Ovo', preco=Decimal('2.00')),
                ],
            ),
            OpcaoProduto(
                id='op-2', titulo='Ponto', obrigatoria=True, max_opcoes=1,
                variacoes=[Variacao(id='var-3', nome='Ao ponto')],
            ),
        ]

    def test_uma_variacao_quantidade_dois(self):
        """
        Cenário: base 10.00, quantidade 2 e um adicional de 3.00.
        """
        selecoes = {'op-1': ['var-1']}
        total = precificacao.calcular_preco_total(selecoes, self.opcoes, Decimal('10.00'), 2)
        unitario = precificacao.calcular_preco_unitario(selecoes, self.opcoes, Decimal('10.00'), 2)

        self.assertEqual(total, Decimal('26.00'))
        self.assertEqual(unitario, Decimal('13.00'))

    def test_sem_variacoes_e_quantidade_vezes_base(self):
        total = precificacao.calcular_preco_total({}, self.opcoes, Decimal('7.50'), 3)
        self.assertEqual(total, Decimal('22.50'))

    def test_ids_desconhecidos_sao_ignorados(self):
        selecoes = {'op-1': ['var-1', 'var-x'], 'op-inexistente': ['var-2']}
        total = precificacao.calcular_preco_total(selecoes, self.opcoes, Decimal('10.00'), 1)
        self.assertEqual(total, Decimal('13.00'))

    def test_varias_variacoes_somam(self):
        selecoes = {'op-1': ['var-1', 'var-2']}
        total = precificacao.calcular_preco_total(selecoes, self.opcoes, Decimal('10.00'), 2)
        self.assertEqual(total, Decimal('30.00'))

    def test_quantidade_zero_no_unitario_falha(self):
        with self.assertRaises(DadosInvalidosError):
            precificacao.calcular_preco_unitario({}, self.opcoes, Decimal('10.00'), 0)

    def test_nomes_selecionados(self):
        nomes = precificacao.nomes_selecionados({'op-1': ['var-2', 'var-9'], 'op-2': ['var-3']}, self.opcoes)
        self.assertEqual(nomes, {'Adicionais': ['Ovo'], 'Ponto': ['Ao ponto']})

    def test_opcao_obrigatoria_sem_escolha_falha(self):
        with self.assertRaises(SelecaoInvalidaError) as ctx:
            precificacao.validar_selecoes({'op-1': ['var-1']}, self.opcoes)
        self.assertEqual(ctx.exception.opcao_titulo, 'Ponto')

    def test_escolhas_acima_do_limite_falham(self):
        self.opcoes[0].max_opcoes = 1
        with self.assertRaises(SelecaoInvalidaError):
            precificacao.validar_selecoes({'op-1': ['var-1', 'var-2'], 'op-2': ['var-3']}, self.opcoes)


# ====================================================================
# CASOS DE USO DO CARDÁPIO E CARRINHO
# ====================================================================

class TestListarCardapio(unittest.TestCase):

    def setUp(self):
        self.use_case = ListarCardapioUseCase(ProdutoRepository(), CategoriaRepository())

    def test_agrupa_na_ordem_das_categorias(self):
        grupos = self.use_case.agrupar_por_categoria(self.use_case.listar_produtos())

        self.assertEqual([nome for nome, _ in grupos], ['Lanches', 'Bebidas'])
        self.assertEqual(grupos[0][1][0].nome, 'X-Burger')

    def test_busca_textual_e_categoria(self):
        self.assertEqual([p.id for p in self.use_case.listar_produtos(busca='refri')], ['prod-102'])
        self.assertEqual([p.id for p in self.use_case.listar_produtos(categoria_id=1)], ['prod-101'])
        self.assertEqual(self.use_case.listar_produtos(busca='pizza'), [])


class TestDetalharProduto(unittest.TestCase):

    def test_produto_inexistente(self):
        with self.assertRaises(ProdutoNaoEncontradoError):
            DetalharProdutoUseCase(ProdutoRepository()).executar('nao-existe')

    def test_falha_nas_opcoes_exibe_produto_sem_opcoes(self):
        from cardapio.core.exceptions import BackendIndisponivelError

        repo_mock = Mock()
        repo_mock.buscar_por_id.return_value = Produto(id='p1', nome='Suco', preco=Decimal('9.00'))
        repo_mock.buscar_opcoes.side_effect = BackendIndisponivelError()

        produto, opcoes = DetalharProdutoUseCase(repo_mock).executar('p1')

        self.assertEqual(produto.id, 'p1')
        self.assertEqual(opcoes, [])


class TestCotarProduto(unittest.TestCase):

    def setUp(self):
        self.use_case = CotarProdutoUseCase(ProdutoRepository())

    def test_cotacao_com_adicional(self):
        cotacao = self.use_case.executar('prod-101', {'op-1': ['var-2'], 'op-2': ['var-3']}, 2)

        self.assertEqual(cotacao.preco_total, Decimal('26.00'))
        self.assertEqual(cotacao.preco_unitario, Decimal('13.00'))
        self.assertEqual(cotacao.opcoes_selecionadas, {'Ponto da carne': ['Ao ponto'], 'Adicionais': ['Bacon']})

    def test_sem_escolher_opcao_obrigatoria(self):
        with self.assertRaises(SelecaoInvalidaError):
            self.use_case.executar('prod-101', {}, 1)

    def test_quantidade_invalida(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.executar('prod-102', {}, 0)


class TestGerenciarCarrinho(unittest.TestCase):

    def setUp(self):
        self.store = CarrinhoEmMemoria()
        self.use_case = GerenciarCarrinhoUseCase(self.store)
        self.cotacao = CotarProdutoUseCase(ProdutoRepository()).executar('prod-101', {'op-1': ['var-1']}, 2)

    def test_adicionar_item_a_partir_da_cotacao(self):
        item = self.use_case.adicionar_item(self.cotacao)

        self.assertTrue(item.id.startswith('prod-101-'))
        self.assertEqual(item.preco, Decimal('10.00'))
        self.assertEqual(item.preco_total, Decimal('20.00'))
        self.assertEqual(self.store.carrinho.quantidade_total, 2)

    def test_cada_adicao_e_uma_linha_nova(self):
        self.use_case.adicionar_item(self.cotacao)
        segundo = ItemCarrinho(produto_id='prod-101', nome='X-Burger', preco=Decimal('10.00'), quantidade=1, id='outro')
        self.store.add_item(segundo)

        self.assertEqual(len(self.store.carrinho.itens), 2)
        self.assertEqual(self.store.carrinho.total, Decimal('30.00'))

    def test_quantidade_zero_remove(self):
        item = self.use_case.adicionar_item(self.cotacao)
        carrinho = self.use_case.atualizar_quantidade(item.id, 0)
        self.assertTrue(carrinho.is_empty())

    def test_atualizar_quantidade_recalcula_total(self):
        item = self.use_case.adicionar_item(self.cotacao)
        carrinho = self.use_case.atualizar_quantidade(item.id, 5)
        self.assertEqual(carrinho.get_item(item.id).preco_total, Decimal('50.00'))

    def test_remover_item_inexistente(self):
        from cardapio.core.exceptions import ItemNaoEncontradoError

        with self.assertRaises(ItemNaoEncontradoError):
            self.use_case.remover_item('nao-existe')


# ====================================================================
# CASOS DE USO DE PEDIDO
# ====================================================================

class TestCriarPedido(unittest.TestCase):

    def setUp(self):
        self.pedido_repo_mock = Mock()
        self.info_loja_mock = Mock()
        self.info_loja_mock.obter.return_value = InfoLoja(nome='Loja', taxa_entrega=Decimal('5.00'))
        self.item = ItemCarrinho(
            produto_id='prod-101', nome='X-Burger', preco=Decimal('13.00'), quantidade=2,
            opcoes_selecionadas={'Adicionais': ['Bacon']}, id='prod-101-1',
        )
        self.store = CarrinhoEmMemoria([self.item])
        self.use_case = CriarPedidoUseCase(self.pedido_repo_mock, self.store, self.info_loja_mock)

    def test_criar_pedido_com_sucesso(self):
        """
        Cenário: checkout com carrinho e endereço válidos.
        """
        pedido_criado = Pedido(id='novo', usuario_id='u-1', status=StatusPedido.PENDENTE, total=Decimal('31.00'))
        self.pedido_repo_mock.criar_pedido.return_value = pedido_criado

        pedido = self.use_case.executar('u-1', _endereco_completo(), nome_cliente='Ana')

        self.assertIs(pedido, pedido_criado)
        kwargs = self.pedido_repo_mock.criar_pedido.call_args.kwargs
        self.assertEqual(kwargs['total'], Decimal('31.00'))
        self.assertEqual(kwargs['status'], StatusPedido.PENDENTE)
        self.assertEqual(kwargs['itens'], [self.item.to_dict()])
        self.assertEqual(kwargs['nome_cliente'], 'Ana')
        self.assertTrue(self.store.carrinho.is_empty())

    def test_carrinho_vazio_falha(self):
        self.store.clear_carrinho()
        with self.assertRaises(CarrinhoVazioError):
            self.use_case.executar('u-1', _endereco_completo())
        self.pedido_repo_mock.criar_pedido.assert_not_called()

    def test_endereco_incompleto_falha(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.executar('u-1', Endereco(rua='Rua A', numero='1'))
        self.pedido_repo_mock.criar_pedido.assert_not_called()
        self.assertFalse(self.store.carrinho.is_empty())

    def test_pedido_gravado_no_repositorio_em_memoria(self):
        repo = PedidoRepository()
        use_case = CriarPedidoUseCase(repo, self.store, self.info_loja_mock)

        pedido = use_case.executar('u-1', _endereco_completo(), nome_cliente='Ana')

        self.assertEqual(pedido.status, StatusPedido.PENDENTE)
        self.assertEqual(pedido.itens[0].opcoes_selecionadas, {'Adicionais': ['Bacon']})
        self.assertEqual(pedido.endereco.cidade, 'Recife')
        self.assertEqual(pedido.nome_cliente, 'Ana')


class TestGerenciarPedidosAdmin(unittest.TestCase):

    def setUp(self):
        self.pedido_repo = PedidoRepository()
        self.perfil_repo = PerfilRepository({'u-1': Perfil(id='u-1', nome='João')})
        self.use_case = GerenciarPedidosAdminUseCase(self.pedido_repo, self.perfil_repo)

        self.pedido = self.pedido_repo.criar_pedido(
            usuario_id='u-1',
            itens=[{'productId': 'prod-101', 'name': 'X-Burger', 'price': '10.00', 'quantity': 1}],
            endereco=_endereco_completo(),
            total=Decimal('10.00'),
            status=StatusPedido.PENDENTE,
        )
        self.pedido_repo.adicionar_linha({
            'id': 'ffff0000-sem-perfil',
            'user_id': 'u-2',
            'status': 'cancelled',
            'total': '5.00',
            'items': '[]',
            'address': '{"street": "Rua B", "customer_name": "Carla"}',
        })

    def test_listar_todos_anexa_perfil(self):
        pedidos = self.use_case.listar_todos(status='all')

        self.assertEqual(len(pedidos), 2)
        clientes = {p.id: p.cliente for p in pedidos}
        self.assertEqual(clientes[self.pedido.id], 'João')
        self.assertEqual(clientes['ffff0000-sem-perfil'], 'Carla')

    def test_filtro_por_status_e_busca(self):
        self.assertEqual([p.id for p in self.use_case.listar_todos(status='cancelled')], ['ffff0000-sem-perfil'])
        self.assertEqual([p.id for p in self.use_case.listar_todos(busca='FFFF0000')], ['ffff0000-sem-perfil'])
        self.assertEqual(self.use_case.listar_todos(status='inexistente'), [])

    def test_cliente_nao_encontrado(self):
        pedido = Pedido(id='x', usuario_id=None, status=StatusPedido.PENDENTE, total=Decimal('0'))
        self.assertEqual(pedido.cliente, 'Cliente não encontrado')

    def test_mesmo_status_so_altera_data(self):
        """
        Cenário: gravar o status atual novamente não altera itens nem total.
        """
        antes = self.pedido_repo.buscar_por_id(self.pedido.id)

        depois = self.use_case.atualizar_status(self.pedido.id, 'pending')

        self.assertEqual(depois.status, StatusPedido.PENDENTE)
        self.assertEqual(depois.total, antes.total)
        self.assertEqual(depois.itens, antes.itens)
        self.assertIsNone(antes.atualizado_em)
        self.assertIsNotNone(depois.atualizado_em)

    def test_qualquer_transicao_e_permitida(self):
        pedido = self.use_case.atualizar_status('ffff0000-sem-perfil', 'pending')
        self.assertEqual(pedido.status_label, 'Pendente')

    def test_status_invalido(self):
        with self.assertRaises(StatusInvalidoError):
            self.use_case.atualizar_status(self.pedido.id, 'voando')

    def test_pedido_inexistente(self):
        with self.assertRaises(PedidoNaoEncontradoError):
            self.use_case.atualizar_status('nao-existe', 'delivered')
        with self.assertRaises(PedidoNaoEncontradoError):
            self.use_case.detalhar_pedido('nao-existe')


if __name__ == '__main__':
    unittest.main()
