class BaseErroCore(Exception):
    """Classe base para todas as exceções da Camada Core."""
    pass

class DadosInvalidosError(BaseErroCore):
    """Erro levantado quando dados inválidos são fornecidos."""
    def __init__(self, message="Os dados fornecidos são inválidos."):
        self.message = message
        super().__init__(self.message)

# ===============================================
# ERROS DE PERSISTÊNCIA E ENTIDADE
# ===============================================

class ItemNaoEncontradoError(BaseErroCore):
    """Erro levantado quando um item (genérico) não é encontrado."""
    def __init__(self, message="O item solicitado não foi encontrado."):
        self.message = message
        super().__init__(self.message)

class ProdutoNaoEncontradoError(ItemNaoEncontradoError):
    """Erro levantado quando um produto específico não é encontrado."""
    def __init__(self, message="Produto não encontrado."):
        super().__init__(message)

class PedidoNaoEncontradoError(ItemNaoEncontradoError):
    """Erro específico para Pedidos não encontrados."""
    def __init__(self, message="Pedido não encontrado."):
        super().__init__(message)

class BackendIndisponivelError(BaseErroCore):
    """Erro levantado quando o banco de dados não responde ou rejeita a consulta."""
    def __init__(self, message="Não foi possível acessar o banco de dados."):
        self.message = message
        super().__init__(self.message)

# ===============================================
# ERROS DE FLUXO DE COMPRA
# ===============================================

class CarrinhoVazioError(BaseErroCore):
    """Erro levantado ao tentar fazer checkout com carrinho vazio."""
    def __init__(self, message="O carrinho de compras está vazio."):
        self.message = message
        super().__init__(self.message)

class SelecaoInvalidaError(BaseErroCore):
    """Erro levantado quando as opções escolhidas não respeitam as regras do produto."""
    def __init__(self, opcao_titulo: str, message=None):
        self.opcao_titulo = opcao_titulo
        if message is None:
            message = f"Seleção inválida para a opção '{opcao_titulo}'."
        self.message = message
        super().__init__(message)

class StatusInvalidoError(BaseErroCore):
    """Erro levantado ao tentar definir um status de pedido inválido."""
    def __init__(self, message="O status fornecido não é válido para um pedido."):
        self.message = message
        super().__init__(self.message)
