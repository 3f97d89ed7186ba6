"""
ci-taskmap — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do ci-taskmap.
Erros e avisos são artefatos do render e fazem parte do contrato
operacional do sistema, devendo ser:

- explícitos
- serializáveis
- acionáveis

Política de propagação:
- Erros estruturais do grafo (referência não resolvida, ambígua, nome
  duplicado, ciclo) abortam a construção do TaskGraph.
- Erros cosméticos (paleta esgotada, matrix malformada) degradam o render
  de forma controlada e nunca o interrompem.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from ci_taskmap.core.exceptions import (
    AmbiguousReference,
    DependencyCycle,
    DuplicateTaskName,
    TaskMapException,
    UnresolvedReference,
)


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaskMapErrorPayload:
    """
    Payload canônico de erro/aviso do ci-taskmap.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    - fatal: indica se o erro abortou a construção do grafo
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    fatal: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Estruturais (fatais)
UNRESOLVED_REFERENCE = "UNRESOLVED_REFERENCE"
AMBIGUOUS_REFERENCE = "AMBIGUOUS_REFERENCE"
DUPLICATE_TASK_NAME = "DUPLICATE_TASK_NAME"
DEPENDENCY_CYCLE = "DEPENDENCY_CYCLE"

# Cosméticos (não fatais)
PALETTE_EXHAUSTED = "PALETTE_EXHAUSTED"
MALFORMED_MATRIX_SHAPE = "MALFORMED_MATRIX_SHAPE"

# Genérico
TASKMAP_INTERNAL_ERROR = "TASKMAP_INTERNAL_ERROR"

_EXCEPTION_CODES = {
    UnresolvedReference: UNRESOLVED_REFERENCE,
    AmbiguousReference: AMBIGUOUS_REFERENCE,
    DuplicateTaskName: DUPLICATE_TASK_NAME,
    DependencyCycle: DEPENDENCY_CYCLE,
}


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def palette_exhausted(
    *,
    palette_size: int,
    fallback_color: str,
    task: Optional[str] = None,
    hint: str = "Forneça uma paleta com pelo menos uma cor por task para distinguir todas as cadeias.",
) -> TaskMapErrorPayload:
    return TaskMapErrorPayload(
        type=PALETTE_EXHAUSTED,
        message="Paleta de cores esgotada; usando cor de fallback",
        details={
            "palette_size": palette_size,
            "fallback_color": fallback_color,
            "task": task,
        },
        hint=hint,
        fatal=False,
    )


def malformed_matrix_shape(
    *,
    task: str,
    section: str,
    received: str,
    hint: str = "Declare a matrix como uma lista de mapeamentos (ex.: `- FOO: bar`).",
) -> TaskMapErrorPayload:
    return TaskMapErrorPayload(
        type=MALFORMED_MATRIX_SHAPE,
        message=f"Matrix com formato inesperado em '{task}' ({section}); ignorada",
        details={
            "task": task,
            "section": section,
            "received": received,
        },
        hint=hint,
        fatal=False,
    )


def exception_to_payload(exc: Exception) -> TaskMapErrorPayload:
    """Converte exceções em TaskMapErrorPayload (serializável, acionável).

    Regras:
    - TaskMapException: já vem com message/details/hint; o código vem do catálogo.
    - Outras exceções: encapsular como TASKMAP_INTERNAL_ERROR sem expor stack trace.
    """
    if isinstance(exc, TaskMapException):
        code = _EXCEPTION_CODES.get(type(exc), exc.__class__.__name__)
        return TaskMapErrorPayload(
            type=code,
            message=exc.message,
            details=dict(exc.details or {}),
            hint=exc.hint,
            fatal=True,
        )

    return TaskMapErrorPayload(
        type=TASKMAP_INTERNAL_ERROR,
        message=str(exc) or "Erro inesperado durante a construção do grafo",
        details={"exception_class": exc.__class__.__name__},
        hint="Verifique o documento de configuração e as opções informadas",
        fatal=True,
    )


def payloads_to_dicts(payloads: List[TaskMapErrorPayload]) -> List[Dict[str, Any]]:
    return [p.to_dict() for p in payloads]
