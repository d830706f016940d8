"""
Define as URLs da camada de apresentação: cardápio, carrinho, checkout,
autenticação, painel de pedidos e as rotas de API REST.
"""
from django.urls import path

from . import views, views_admin, views_api, views_auth


urlpatterns = [
    # ====================================================================
    # 1. ROTAS DO CARDÁPIO (LOJA)
    # ====================================================================
    path('', views.CardapioView.as_view(), name='cardapio'),
    path('produto/<str:pk>/', views.DetalheProdutoView.as_view(), name='detalhe_produto'),

    # ====================================================================
    # 2. ROTAS DE COMPRA (CARRINHO E CHECKOUT)
    # ====================================================================
    path('carrinho/', views.CarrinhoView.as_view(), name='carrinho'),
    path('carrinho/adicionar/<str:produto_id>/', views.adicionar_ao_carrinho, name='adicionar_carrinho'),
    path('carrinho/remover/<str:item_id>/', views.remover_do_carrinho, name='remover_carrinho'),
    path('carrinho/quantidade/<str:item_id>/', views.atualizar_quantidade, name='atualizar_quantidade'),
    path('checkout/', views.ProcessarCheckoutView.as_view(), name='checkout'),
    path('pedido/<str:pk>/', views.DetalhePedidoView.as_view(), name='detalhe_pedido'),
    path('meus-pedidos/', views.HistoricoPedidosView.as_view(), name='historico_pedidos'),

    # ====================================================================
    # 3. ROTAS DE AUTENTICAÇÃO
    # ====================================================================
    path('login/', views_auth.LoginView.as_view(), name='login'),
    path('logout/', views_auth.logout_usuario, name='logout'),

    # ====================================================================
    # 4. PAINEL DE PEDIDOS (EQUIPE)
    # ====================================================================
    path('painel/pedidos/', views_admin.GerenciarPedidosView.as_view(), name='gerenciar_pedidos'),
    path('painel/pedidos/<str:pk>/', views_admin.DetalhePedidoAdminView.as_view(), name='admin_detalhe_pedido'),
    path('painel/pedidos/<str:pk>/status/', views_admin.AtualizarStatusPedidoView.as_view(), name='admin_atualizar_status'),

    # ====================================================================
    # 5. ROTAS DE API (Django REST Framework)
    # ====================================================================
    path('api/produtos/', views_api.ProdutoListAPIView.as_view(), name='api_produtos'),
    path('api/produtos/<str:pk>/', views_api.ProdutoDetailAPIView.as_view(), name='api_produto_detalhe'),
    path('api/produtos/<str:pk>/cotacao/', views_api.CotacaoAPIView.as_view(), name='api_produto_cotacao'),
    path('api/carrinho/', views_api.CarrinhoAPIView.as_view(), name='api_carrinho'),
    path('api/checkout/', views_api.CheckoutAPIView.as_view(), name='api_checkout'),
    path('api/admin/pedidos/', views_api.PedidoAdminListAPIView.as_view(), name='api_admin_pedidos'),
    path('api/admin/pedidos/<str:pk>/', views_api.PedidoAdminDetailAPIView.as_view(), name='api_admin_pedido_detalhe'),
    path('api/admin/pedidos/<str:pk>/status/', views_api.PedidoStatusAPIView.as_view(), name='api_admin_pedido_status'),
]
