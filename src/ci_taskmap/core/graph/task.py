# src/ci_taskmap/core/graph/task.py
"""
Entidade Task: uma unidade de trabalho declarada no documento de CI.

Uma Task guarda apenas o que foi declarado (nome, alias, dependências
brutas, matrizes). Toda resolução de referências recebe o TaskGraph dono
como parâmetro explícito: a Task não mantém ponteiro de volta para o grafo.

Convenção de nomes:
    - `lint_task`  → nome interno `lint`
    - `task`       → placeholder genérico; usa `alias` quando declarado

Formato das matrizes (validado uma única vez, na construção):
    - `matrix:`       lista de mapeamentos (variantes da task)
    - `env.matrix:`   lista de mapeamentos variável → valor

Qualquer outro formato é registrado como MALFORMED_MATRIX_SHAPE e a
matrix correspondente é ignorada.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

from ci_taskmap.core.config.errors import InvalidConfigRootTypeError
from ci_taskmap.core.errors import TaskMapErrorPayload, malformed_matrix_shape
from ci_taskmap.core.graph.matrix import env_matrix_lines, variant_lines

if TYPE_CHECKING:  # pragma: no cover
    from ci_taskmap.core.graph.task_graph import TaskGraph


GENERIC_TASK_NAME = "task"

_TASK_KEY = re.compile(r"^(?:(?P<name>.+)_)?task$")


def is_task_key(key: Any) -> bool:
    return isinstance(key, str) and _TASK_KEY.match(key) is not None


def _parse_matrix(
    raw: Any, *, task: str, section: str
) -> Tuple[Tuple[Dict[str, Any], ...], Optional[TaskMapErrorPayload]]:
    if raw is None:
        return (), None
    if isinstance(raw, (list, tuple)) and all(isinstance(i, Mapping) for i in raw):
        return tuple(dict(i) for i in raw), None
    return (), malformed_matrix_shape(task=task, section=section, received=type(raw).__name__)


@dataclass(frozen=True)
class EnvMatrix:
    """Matrix de ambiente no formato esperado: tuplas variável → valor."""

    tuples: Tuple[Dict[str, Any], ...]

    @classmethod
    def parse(
        cls, raw: Any, *, task: str
    ) -> Tuple[Optional["EnvMatrix"], Optional[TaskMapErrorPayload]]:
        tuples, problem = _parse_matrix(raw, task=task, section="env.matrix")
        if not tuples:
            return None, problem
        return cls(tuples=tuples), None

    def lines(self) -> List[str]:
        return env_matrix_lines(self.tuples)


@dataclass(frozen=True, eq=False)
class Task:
    """
    Uma task do documento de CI.

    Campos:
        - key: chave original no documento (ex.: `build_task`)
        - internal_name: identificador do nó no grafo
        - configured_name: campo `name` (override de exibição)
        - alias: identificador alternativo aceito em `depends_on`
        - depends_on: identificadores como foram escritos
        - variant_matrix: itens da `matrix` da task
        - env: ambiente da task, sem a `matrix` aninhada
        - env_matrix: EnvMatrix ou None
    """

    key: str
    internal_name: str
    configured_name: Optional[str] = None
    alias: Optional[str] = None
    depends_on: Tuple[str, ...] = ()
    variant_matrix: Tuple[Dict[str, Any], ...] = ()
    env: Dict[str, Any] = field(default_factory=dict)
    env_matrix: Optional[EnvMatrix] = None

    @classmethod
    def from_config(
        cls, key: str, body: Optional[Mapping[str, Any]]
    ) -> Tuple["Task", List[TaskMapErrorPayload]]:
        """Constrói a Task a partir da chave e do corpo declarados no documento."""
        if body is None:
            body = {}
        if not isinstance(body, Mapping):
            raise InvalidConfigRootTypeError(
                f"Task '{key}' deve ser um mapeamento, recebido: {type(body).__name__}"
            )

        match = _TASK_KEY.match(key)
        if match is None:
            raise ValueError(f"'{key}' não é uma chave de task")

        alias = body.get("alias")
        alias = str(alias) if alias else None
        internal_name = match.group("name") or GENERIC_TASK_NAME
        if internal_name == GENERIC_TASK_NAME and alias:
            internal_name = alias

        raw_deps = body.get("depends_on") or ()
        if isinstance(raw_deps, str):
            raw_deps = (raw_deps,)
        elif not isinstance(raw_deps, (list, tuple)):
            raise InvalidConfigRootTypeError(
                f"`depends_on` de '{key}' deve ser uma lista ou string,"
                f" recebido: {type(raw_deps).__name__}"
            )
        depends_on = tuple(str(d) for d in raw_deps)

        problems: List[TaskMapErrorPayload] = []

        variants, problem = _parse_matrix(body.get("matrix"), task=internal_name, section="matrix")
        if problem is not None:
            problems.append(problem)

        raw_env = body.get("env")
        env: Dict[str, Any] = {}
        env_matrix = None
        if isinstance(raw_env, Mapping):
            env = {k: v for k, v in raw_env.items() if k != "matrix"}
            env_matrix, problem = EnvMatrix.parse(raw_env.get("matrix"), task=internal_name)
            if problem is not None:
                problems.append(problem)

        configured_name = body.get("name")
        task = cls(
            key=key,
            internal_name=internal_name,
            configured_name=str(configured_name) if configured_name else None,
            alias=alias,
            depends_on=depends_on,
            variant_matrix=variants,
            env=env,
            env_matrix=env_matrix,
        )
        return task, problems

    @property
    def is_start_node(self) -> bool:
        return not self.depends_on

    def name(self) -> str:
        return self.internal_name

    def display_name(self) -> str:
        return self.configured_name or self.name()

    # ------------------------------------------------------------------
    # Resolução (sempre contra o grafo informado)
    # ------------------------------------------------------------------

    def depends_on_tasks(self, graph: "TaskGraph") -> List["Task"]:
        """Tasks das quais esta depende; propaga Unresolved/AmbiguousReference."""
        return [graph.find(identifier) for identifier in self.depends_on]

    def depended_on_by(self, graph: "TaskGraph") -> List["Task"]:
        """Tasks que declararam dependência nesta (por nome ou alias), ordenadas por nome."""
        return [graph.find(name) for name in graph.dependents_of(self)]

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    def subtask_labels(self, document_env: Optional[Mapping[str, Any]] = None) -> List[str]:
        return variant_lines(
            self.variant_matrix,
            document_env=document_env,
            task_env=self.env,
            configured_name=self.configured_name,
            task_name=self.name(),
        )

    def env_matrix_labels(self) -> List[str]:
        if self.env_matrix is None:
            return []
        return self.env_matrix.lines()
