from django.apps import AppConfig


class InfrastructureConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'cardapio.infrastructure'
    label = 'infrastructure'  # Label curto usado em AUTH_USER_MODEL
    verbose_name = 'Cardápio e Pedidos'
