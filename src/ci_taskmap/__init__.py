# src/ci_taskmap/__init__.py
"""
ci-taskmap — mapa de dependências de tasks de CI.

Constrói um grafo direcionado a partir de um documento de CI declarativo
(chaves `*_task`, no estilo Cirrus CI) e o emite como texto DOT para o
Graphviz.

Uso típico:

    >>> from ci_taskmap import TaskGraph, GraphEmitter, load_document
    >>> graph = TaskGraph.build(load_document(".cirrus.yml"))
    >>> print(GraphEmitter().render(graph).dot)

Arquitetura em alto nível:
    - core.config   → leitura do documento e resolução de opções
    - core.graph    → Task, TaskGraph e expansão de matrizes
    - core.render   → GraphEmitter e RenderContext
    - cli           → colaborador externo: git, `tred`, `dot`, argparse
"""

from ci_taskmap.core.config import load_document
from ci_taskmap.core.exceptions import (
    AmbiguousReference,
    DependencyCycle,
    DuplicateTaskName,
    TaskMapException,
    UnresolvedReference,
)
from ci_taskmap.core.graph.task import Task
from ci_taskmap.core.graph.task_graph import TaskGraph
from ci_taskmap.core.metadata import GitMetadataProvider, StaticGitMetadata
from ci_taskmap.core.options import RenderOptions, load_options
from ci_taskmap.core.render.context import RenderContext
from ci_taskmap.core.render.emitter import GraphEmitter, RenderResult

__version__ = "0.1.0"

__all__ = [
    "AmbiguousReference",
    "DependencyCycle",
    "DuplicateTaskName",
    "GitMetadataProvider",
    "GraphEmitter",
    "RenderContext",
    "RenderOptions",
    "RenderResult",
    "StaticGitMetadata",
    "Task",
    "TaskGraph",
    "TaskMapException",
    "UnresolvedReference",
    "load_document",
    "load_options",
]
