from __future__ import annotations


class DomainError(Exception):
    """Base para erros de dominio."""


class TokenAddressInputError(DomainError):
    """Endereco de token invalido."""


class PoolDiscoveryError(DomainError):
    """Indice de pools indisponivel ou com resposta malformada."""


class NoPoolFoundError(DomainError):
    """Nenhuma pool pareando o ativo nativo com o token."""


class PoolStateUnavailableError(DomainError):
    """Estado on-chain da pool ausente ou vazio."""


class QuoteComputationError(DomainError):
    """Falha ao simular a cotacao ou ao normalizar valores."""


class ObservationsInputError(DomainError):
    """Parametros invalidos para leitura do historico."""
