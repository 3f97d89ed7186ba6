# src/ci_taskmap/core/render/emitter.py
"""
Emissor da descrição DOT de um TaskGraph.

Este módulo percorre o TaskGraph a partir dos start nodes, em pré-ordem
com memoização, e produz o texto DOT entregue ao `tred`/`dot`.

Algoritmo:
    - start nodes em ordem lexicográfica
    - cada nó recém-descoberto consome a próxima cor da paleta
    - cada aresta `origem -> dependente` recebe a cor da origem, de modo
      que uma cadeia inteira é lida com uma só cor
    - um nó já visitado é ignorado: nós alcançáveis por vários caminhos
      (diamantes) e ciclos são desenhados exatamente uma vez

Formato de saída (contrato com o Graphviz):

    strict digraph X {
      graph [fontname="Courier" rankdir=LR ratio=0.7]
      label="<repo>: <branch> @ <rev>"
      labelloc=t
      "lint" [shape=box style="bold,rounded" color=blue fontcolor=blue]
      "lint" -> "build" [color=blue]
      ...
    }

Decisões arquiteturais:
    - O estado da travessia (visitados, cursor da paleta, buffer) é privado
      de cada chamada a `render`
    - Paleta esgotada e matrix malformada são warnings, nunca exceções
    - Tasks inalcançáveis a partir de start nodes (membros de um ciclo sem
      entrada) são desenhadas ao final, em ordem de nome

Limites explícitos:
    - Não executa `tred` nem `dot`
    - Não faz redução transitiva
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Set, Tuple

from ci_taskmap.core.errors import palette_exhausted
from ci_taskmap.core.metadata import ChainedGitMetadata, GitMetadataProvider, StaticGitMetadata, format_title
from ci_taskmap.core.options import RenderOptions
from ci_taskmap.core.graph.matrix import LINE_BREAK
from ci_taskmap.core.graph.task import Task
from ci_taskmap.core.graph.task_graph import TaskGraph
from ci_taskmap.core.render.context import GRAPH_SCOPE, RenderContext

GRAPH_NAME = "X"
GRAPH_ATTRIBUTES = 'fontname="Courier" rankdir=LR ratio=0.7'

BOX_SHAPE = "box"
BOX_STYLE = '"bold,rounded"'
RECORD_SHAPE = "record"
RECORD_STYLE = "bold"
FIELD_SEPARATOR = "|"

# caracteres com significado dentro de um label `record`
_RECORD_SPECIALS = str.maketrans({c: "\\" + c for c in '{}|<>"'})


def quote(identifier: str) -> str:
    return '"' + identifier.replace("\\", "\\\\").replace('"', '\\"') + '"'


def escape_record(text: str) -> str:
    """Escapa um label de record preservando o marcador de quebra `\\l` final."""
    if text.endswith(LINE_BREAK):
        return text[: -len(LINE_BREAK)].translate(_RECORD_SPECIALS) + LINE_BREAK
    return text.translate(_RECORD_SPECIALS)


@dataclass(frozen=True)
class RenderResult:
    """Resultado de um render: texto DOT + sinais de observabilidade."""

    dot: str
    warnings: List[Dict[str, Any]] = field(default_factory=list)
    events: List[Dict[str, Any]] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class _RenderState:
    graph: TaskGraph
    ctx: RenderContext
    palette: Iterator[str]
    palette_size: int
    visited: Set[str] = field(default_factory=set)
    colors: Dict[str, str] = field(default_factory=dict)
    lines: List[str] = field(default_factory=list)
    edges: int = 0
    exhausted: bool = False


class GraphEmitter:
    """Converte um TaskGraph em texto DOT determinístico."""

    def __init__(
        self,
        options: Optional[RenderOptions] = None,
        *,
        git: Optional[GitMetadataProvider] = None,
    ):
        self.options = options or RenderOptions()
        # opções explícitas têm precedência sobre o provider injetado
        self.git = ChainedGitMetadata(StaticGitMetadata.from_options(self.options), git)

    def title(self) -> str:
        return format_title(self.git)

    def header_lines(self) -> List[str]:
        lines = [
            f"strict digraph {GRAPH_NAME} {{",
            f"  graph [{GRAPH_ATTRIBUTES}]",
        ]
        if self.options.title:
            lines.append(f"  label={quote(self.title())}")
            lines.append("  labelloc=t")
        return lines

    def render(
        self,
        graph: TaskGraph,
        palette: Optional[Sequence[str]] = None,
        ctx: Optional[RenderContext] = None,
    ) -> RenderResult:
        """
        Emite o grafo completo.

        Args:
            graph: TaskGraph já construído.
            palette: Cores a consumir; padrão `options.palette`.
            ctx: Contexto de observabilidade; um novo é criado se omitido.

        Returns:
            RenderResult com o texto DOT, warnings (payloads canônicos),
            eventos e metadados (hash do documento, contagens, cores).
        """
        colors = tuple(self.options.palette if palette is None else palette)
        if ctx is None:
            ctx = RenderContext(
                render_id=f"render-{(graph.document_sha256 or 'adhoc')[:12]}",
                debug=self.options.debug,
            )

        for problem in graph.warnings:
            ctx.add_warning(
                task=str(problem.details.get("task") or GRAPH_SCOPE),
                message=problem.message,
                payload=problem,
            )

        state = _RenderState(graph=graph, ctx=ctx, palette=iter(colors), palette_size=len(colors))
        state.lines.extend(self.header_lines())

        starts = graph.start_nodes()
        ctx.log(level="DEBUG", message="start nodes", start_nodes=[t.name() for t in starts])
        for task in starts:
            self.draw_node(state, task)

        for task in sorted(graph.tasks, key=lambda t: t.name()):
            if task.name() not in state.visited:
                ctx.log(task=task.name(), level="INFO", message="task not reachable from any start node")
                self.draw_node(state, task)

        state.lines.append("}")

        return RenderResult(
            dot="\n".join(state.lines) + "\n",
            warnings=ctx.warning_dicts(),
            events=list(ctx.events),
            meta={
                "document_sha256": graph.document_sha256,
                "nodes": len(state.visited),
                "edges": state.edges,
                "colors": dict(state.colors),
            },
        )

    # ------------------------------------------------------------------
    # Travessia
    # ------------------------------------------------------------------

    def _next_color(self, state: _RenderState, task: Task) -> str:
        color = next(state.palette, None)
        if color is not None:
            return color

        fallback = self.options.fallback_color
        if not state.exhausted:
            state.exhausted = True
            state.ctx.add_warning(
                task=task.name(),
                message=f"palette exhausted after {state.palette_size} colors, using {fallback}",
                payload=palette_exhausted(
                    palette_size=state.palette_size,
                    fallback_color=fallback,
                    task=task.name(),
                ),
            )
        state.ctx.log(task=task.name(), level="DEBUG", message="fallback color", color=fallback)
        return fallback

    def _enter(self, state: _RenderState, task: Task) -> Tuple[str, str, Iterator[Task]]:
        name = task.name()
        state.visited.add(name)

        color = self._next_color(state, task)
        state.colors[name] = color
        state.lines.append(self.node_line(task, color, state.graph))
        state.ctx.log(task=name, level="DEBUG", message="node", color=color)
        return name, color, iter(task.depended_on_by(state.graph))

    def draw_node(self, state: _RenderState, task: Task) -> None:
        """
        Desenha `task` e tudo o que depende dela, em pré-ordem.

        Ordem: nó, aresta, descida no dependente. A travessia usa uma pilha
        explícita; a profundidade da cadeia não é limitada pela recursão.
        """
        if task.name() in state.visited:
            return

        stack = [self._enter(state, task)]
        while stack:
            name, color, pending = stack[-1]
            dependent = next(pending, None)
            if dependent is None:
                stack.pop()
                continue
            state.lines.append(f"  {quote(name)} -> {quote(dependent.name())} [color={color}]")
            state.edges += 1
            if dependent.name() not in state.visited:
                stack.append(self._enter(state, dependent))

    def node_line(self, task: Task, color: str, graph: TaskGraph) -> str:
        variants = task.subtask_labels(graph.document_env)
        env_lines = task.env_matrix_labels()
        name = task.name()

        if not variants and not env_lines:
            return (
                f"  {quote(name)} [shape={BOX_SHAPE} style={BOX_STYLE}"
                f" color={color} fontcolor={color}]"
            )

        label = escape_record(name + LINE_BREAK)
        if variants:
            label += FIELD_SEPARATOR + "".join(escape_record(v) for v in variants)
        if env_lines:
            label += FIELD_SEPARATOR + "".join(escape_record(e) for e in env_lines)

        # o label já está escapado para record; só as aspas externas são adicionadas
        return (
            f"  {quote(name)} [shape={RECORD_SHAPE} style={RECORD_STYLE}"
            f' color={color} fontcolor={color} label="{label}"]'
        )
