"""
Exceções do domínio.

- ValidacaoError: campos obrigatórios ausentes ou valores fora do domínio;
  levantada antes de qualquer chamada ao banco.
- StoreError: falha reportada pelo armazenamento (insert/update/delete).
- CheckoutError: a gravação do pedido falhou e a venda foi abortada.
"""

from __future__ import annotations


class FutmaisError(Exception):
    """Base de todos os erros tratados pela aplicação."""


class ValidacaoError(FutmaisError):
    pass


class StoreError(FutmaisError):
    def __init__(self, colecao: str, operacao: str, detalhe: str):
        self.colecao = colecao
        self.operacao = operacao
        self.detalhe = detalhe
        super().__init__(f"{operacao} em '{colecao}' falhou: {detalhe}")


class CheckoutError(FutmaisError):
    pass
