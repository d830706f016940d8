from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from cardapio.infrastructure.models import Categoria, OpcaoProduto, Produto, VariacaoOpcao


# (nome, descrição, preço, [(título, obrigatória, máximo, [(variação, acréscimo)])])
CARDAPIO = {
    'Lanches': [
        ('X-Burger', 'Pão brioche, hambúrguer 150g, queijo e molho da casa', Decimal('22.90'), [
            ('Ponto da carne', True, 1, [('Mal passado', '0'), ('Ao ponto', '0'), ('Bem passado', '0')]),
            ('Adicionais', False, 3, [('Bacon', '4.00'), ('Ovo', '2.50'), ('Cheddar', '3.00')]),
        ]),
        ('X-Salada', 'Hambúrguer, queijo, alface, tomate e maionese', Decimal('24.90'), [
            ('Adicionais', False, 2, [('Bacon', '4.00'), ('Ovo', '2.50')]),
        ]),
    ],
    'Pizzas': [
        ('Pizza Margherita', 'Molho de tomate, mussarela e manjericão', Decimal('45.00'), [
            ('Tamanho', True, 1, [('Média', '0'), ('Grande', '12.00')]),
            ('Borda recheada', False, None, [('Catupiry', '8.00'), ('Cheddar', '8.00')]),
        ]),
    ],
    'Bebidas': [
        ('Refrigerante Lata', 'Lata 350ml', Decimal('6.00'), [
            ('Sabor', True, None, [('Cola', '0'), ('Guaraná', '0'), ('Laranja', '0')]),
        ]),
        ('Suco Natural', 'Copo 500ml', Decimal('9.00'), []),
    ],
    'Sobremesas': [
        ('Brownie', 'Brownie de chocolate meio amargo', Decimal('12.00'), [
            ('Acompanhamento', False, None, [('Sorvete de creme', '5.00')]),
        ]),
    ],
}


class Command(BaseCommand):
    help = 'Carrega o cardápio inicial (categorias, produtos, opções e variações)'

    @transaction.atomic
    def handle(self, *args, **kwargs):
        self.stdout.write('Criando dados iniciais...')

        for posicao, (cat_nome, produtos) in enumerate(CARDAPIO.items(), start=1):
            categoria, created = Categoria.objects.get_or_create(
                nome=cat_nome, defaults={'ordem': posicao},
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f'Criada categoria "{categoria.nome}"'))

            for nome, desc, preco, opcoes in produtos:
                produto, created = Produto.objects.get_or_create(
                    nome=nome,
                    defaults={'descricao': desc, 'preco': preco, 'categoria': categoria},
                )
                if not created:
                    continue
                self.stdout.write(self.style.SUCCESS(f'Criado produto "{produto.nome}"'))

                for ordem_opcao, (titulo, obrigatoria, maximo, variacoes) in enumerate(opcoes):
                    opcao = OpcaoProduto.objects.create(
                        produto=produto, titulo=titulo, obrigatoria=obrigatoria,
                        max_opcoes=maximo, ordem=ordem_opcao,
                    )
                    VariacaoOpcao.objects.bulk_create([
                        VariacaoOpcao(opcao=opcao, nome=var_nome, preco=Decimal(acrescimo), ordem=i)
                        for i, (var_nome, acrescimo) in enumerate(variacoes)
                    ])

        self.stdout.write(self.style.SUCCESS('Dados iniciais carregados com sucesso!'))
