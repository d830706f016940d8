# cardapio/core/apps.py

from django.apps import AppConfig


class CoreConfig(AppConfig):
    # O nome completo do path da aplicação
    name = 'cardapio.core'
    label = 'core'
    verbose_name = 'Regras de Negócio (Core)'
    # Sem modelos: a persistência fica na Infrastructure
    default_auto_field = 'django.db.models.BigAutoField'
