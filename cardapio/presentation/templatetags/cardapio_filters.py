from decimal import Decimal, InvalidOperation
from datetime import datetime

from django import template
from django.utils import timezone

register = template.Library()


@register.filter
def moeda(value):
    """12.5 -> 'R$ 12.50'"""
    try:
        return f"R$ {Decimal(str(value)):.2f}"
    except (InvalidOperation, ValueError, TypeError):
        return "R$ 0.00"


@register.filter
def data_pedido(value):
    """Data no formato dd/mm/aaaa hh:mm, no fuso local."""
    if not isinstance(value, datetime):
        return "Data inválida"
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime('%d/%m/%Y %H:%M')


@register.filter
def campo_opcao(form, opcao):
    """Campo `opcao_<id>` do formulário do produto."""
    return form[form.nome_campo(opcao)]
