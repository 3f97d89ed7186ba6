# src/ci_taskmap/core/graph/task_graph.py
"""
TaskGraph: o conjunto de tasks de um documento de CI e seus índices.

Este módulo é responsável por interpretar as chaves `*_task` de um
documento já carregado, indexar as dependências declaradas e resolver
referências por nome ou alias.

Construção em duas passadas:
    1. arestas diretas: para cada `depends_on`, registra o dependente em
       um índice reverso pendente, indexado pelo identificador escrito
    2. arestas reversas: para cada task, une os dependentes que a
       citaram pelo nome interno e, se houver, pelo alias; o resultado é
       ordenado lexicograficamente

Após a construção todas as referências são validadas; qualquer
identificador não resolvido ou ambíguo aborta a construção.

Princípios fundamentais:
    - O grafo é imutável após a construção
    - A ordem de travessia é determinística (start nodes ordenados)
    - Ciclos são tolerados por padrão; `fail_on_cycle` os torna fatais

Limites explícitos:
    - Não faz I/O
    - Não emite DOT (ver `ci_taskmap.core.render.emitter`)
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from ci_taskmap.core.config.hashing import compute_config_hash
from ci_taskmap.core.errors import TaskMapErrorPayload
from ci_taskmap.core.exceptions import (
    AmbiguousReference,
    DependencyCycle,
    DuplicateTaskName,
    UnresolvedReference,
)
from ci_taskmap.core.options import RenderOptions
from ci_taskmap.core.graph.task import Task, is_task_key


class TaskGraph:
    """Grafo de dependências entre tasks, com resolução por nome e alias."""

    def __init__(
        self,
        tasks: Iterable[Task],
        *,
        document_env: Optional[Mapping[str, Any]] = None,
        document_name: Optional[str] = None,
        document_sha256: Optional[str] = None,
        warnings: Iterable[TaskMapErrorPayload] = (),
        options: Optional[RenderOptions] = None,
    ):
        self.tasks: Tuple[Task, ...] = tuple(tasks)
        self.document_env: Dict[str, Any] = dict(document_env or {})
        self.document_name = document_name
        self.document_sha256 = document_sha256
        self.warnings: Tuple[TaskMapErrorPayload, ...] = tuple(warnings)
        self.options = options or RenderOptions()

        self._by_name: Dict[str, Task] = {}
        for task in self.tasks:
            other = self._by_name.get(task.name())
            if other is not None:
                raise DuplicateTaskName(
                    message=f"Nome de task duplicado: '{task.name()}'",
                    details={"name": task.name(), "keys": [other.key, task.key]},
                    hint="Renomeie uma das tasks ou ajuste o alias da task genérica.",
                )
            self._by_name[task.name()] = task

        self._dependents: Dict[str, Tuple[str, ...]] = self._index_dependents()
        self._validate_references()

        if self.options.fail_on_cycle:
            self.topological_order()

    # ------------------------------------------------------------------
    # Construção
    # ------------------------------------------------------------------

    @classmethod
    def build(
        cls, document: Mapping[str, Any], *, options: Optional[RenderOptions] = None
    ) -> "TaskGraph":
        """
        Interpreta um documento de CI carregado e constrói o grafo.

        Chaves reconhecidas no nível raiz:
            - `<nome>_task` / `task`: definição de task
            - `env`: ambiente global (usado apenas em labels)
            - `name`: nome do documento (informativo)

        Raises:
            DuplicateTaskName: Se duas chaves produzirem o mesmo nome interno.
            UnresolvedReference: Se um `depends_on` não corresponder a nenhuma task.
            AmbiguousReference: Se um `depends_on` corresponder a mais de uma task.
            DependencyCycle: Se houver ciclo e `options.fail_on_cycle` estiver ativo.
        """
        tasks: List[Task] = []
        warnings: List[TaskMapErrorPayload] = []
        for key, body in document.items():
            if not is_task_key(key):
                continue
            task, problems = Task.from_config(key, body)
            tasks.append(task)
            warnings.extend(problems)

        raw_env = document.get("env")
        document_env = (
            {k: v for k, v in raw_env.items() if k != "matrix"}
            if isinstance(raw_env, Mapping)
            else {}
        )
        name = document.get("name")

        return cls(
            tasks,
            document_env=document_env,
            document_name=str(name) if name else None,
            document_sha256=compute_config_hash(dict(document)),
            warnings=warnings,
            options=options,
        )

    def _index_dependents(self) -> Dict[str, Tuple[str, ...]]:
        pending: Dict[str, Set[str]] = {}
        for task in self.tasks:
            for identifier in task.depends_on:
                pending.setdefault(identifier, set()).add(task.name())

        dependents: Dict[str, Tuple[str, ...]] = {}
        for task in self.tasks:
            names = set(pending.get(task.name(), ()))
            # um alias que coincide com o nome de outra task é resolvido por nome
            if task.alias and task.alias != task.name() and task.alias not in self._by_name:
                names |= pending.get(task.alias, set())
            dependents[task.name()] = tuple(sorted(names))
        return dependents

    def _validate_references(self) -> None:
        for task in self.tasks:
            for identifier in task.depends_on:
                self._resolve(identifier, referenced_by=task.name())

    # ------------------------------------------------------------------
    # Consulta
    # ------------------------------------------------------------------

    def _resolve(self, identifier: str, *, referenced_by: Optional[str] = None) -> Task:
        task = self._by_name.get(identifier)
        if task is not None:
            return task

        aliased = [t for t in self.tasks if t.alias == identifier]
        if len(aliased) == 1:
            return aliased[0]

        if aliased:
            raise AmbiguousReference(
                message=f"Referência ambígua: '{identifier}'",
                details={
                    "identifier": identifier,
                    "candidates": sorted(t.name() for t in aliased),
                    "referenced_by": referenced_by,
                },
                hint="Use aliases únicos ou referencie a task pelo nome interno.",
            )

        raise UnresolvedReference(
            message=f"Referência não resolvida: '{identifier}'",
            details={"identifier": identifier, "referenced_by": referenced_by},
            hint="Confira o `depends_on` contra os nomes (`<nome>_task`) e aliases declarados.",
        )

    def find(self, identifier: str) -> Task:
        """
        Resolve um identificador: nome interno exato primeiro, alias exato depois.

        Raises:
            AmbiguousReference: Se mais de uma task declarar o alias.
            UnresolvedReference: Se nenhuma task corresponder.
        """
        return self._resolve(identifier)

    def start_nodes(self) -> List[Task]:
        return sorted((t for t in self.tasks if t.is_start_node), key=lambda t: t.name())

    def dependents_of(self, task: Task) -> Tuple[str, ...]:
        return self._dependents.get(task.name(), ())

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self):
        return iter(self.tasks)

    # ------------------------------------------------------------------
    # Ordem topológica / ciclos
    # ------------------------------------------------------------------

    def topological_order(self) -> List[Task]:
        """
        Ordem topológica determinística (Kahn, empates por nome).

        Raises:
            DependencyCycle: Se alguma task não puder ser ordenada.
        """
        incoming: Dict[str, int] = {}
        for task in self.tasks:
            incoming[task.name()] = len({t.name() for t in task.depends_on_tasks(self)})

        ready: List[str] = sorted(name for name, count in incoming.items() if count == 0)
        order: List[str] = []

        while ready:
            name = ready.pop(0)
            order.append(name)
            for child in self._dependents[name]:
                incoming[child] -= 1
                if incoming[child] == 0:
                    ready.append(child)
                    ready.sort()

        if len(order) != len(self.tasks):
            blocked = sorted(set(self._by_name) - set(order))
            raise DependencyCycle(
                message=f"Ciclo de dependências envolvendo: {', '.join(blocked)}",
                details={"cycle": blocked},
                hint="Remova a dependência circular do `depends_on`.",
            )

        return [self._by_name[name] for name in order]

    def has_cycle(self) -> bool:
        try:
            self.topological_order()
        except DependencyCycle:
            return True
        return False
