"""
ci-taskmap — Canonical Exceptions (v1)

Este módulo define as exceções tipadas internas do ci-taskmap.

Objetivo:
- Permitir que o TaskGraph levante exceções semânticas tipadas
- Facilitar o mapeamento determinístico para TaskMapErrorPayload
- Evitar ValueError/KeyError genéricos em falhas estruturais do grafo

Regras:
- Apenas falhas estruturais (fatais) são exceções.
- Falhas cosméticas (paleta esgotada, matrix malformada) NÃO são exceções:
  são registradas como warnings no RenderContext.
- Exceções devem carregar apenas dados estruturados (serializáveis).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TaskMapException(Exception):
    """Base class para exceções internas do ci-taskmap.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e nomear o identificador problemático
    """

    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Resolução de referências
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UnresolvedReference(TaskMapException):
    """Identificador em `depends_on` (ou lookup) não corresponde a nenhuma task."""


@dataclass(frozen=True)
class AmbiguousReference(TaskMapException):
    """Identificador corresponde a mais de uma task (colisão de alias)."""


# ---------------------------------------------------------------------------
# Estrutura do grafo
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DuplicateTaskName(TaskMapException):
    """Duas chaves de configuração produzem o mesmo nome interno."""


@dataclass(frozen=True)
class DependencyCycle(TaskMapException):
    """Ciclo de dependências detectado (apenas com `fail_on_cycle`)."""
