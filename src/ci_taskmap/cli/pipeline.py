# src/ci_taskmap/cli/pipeline.py
"""
Entrega do texto DOT às ferramentas do Graphviz.

    DOT ──(opcional) tred──▶ DOT reduzido ──dot -T<fmt> -o <arquivo>──▶ imagem

Limites explícitos:
    - Não tenta novamente em caso de falha
    - Não pós-processa a imagem gerada
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, List, Union

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


class ExternalToolError(RuntimeError):
    """Uma ferramenta do Graphviz falhou ou não está instalada."""

    def __init__(self, tool: str, message: str):
        super().__init__(f"{tool}: {message}")
        self.tool = tool


def _pipe(command: List[str], text: str, runner: Runner) -> str:
    try:
        result = runner(command, input=text, capture_output=True, text=True, check=False)
    except FileNotFoundError as e:
        raise ExternalToolError(command[0], "command not found (is graphviz installed?)") from e
    if result.returncode != 0:
        raise ExternalToolError(command[0], (result.stderr or "").strip() or f"exit status {result.returncode}")
    return result.stdout


def reduce_transitive(dot_text: str, *, runner: Runner = subprocess.run) -> str:
    """Remove arestas implicadas por caminhos mais longos (`tred`)."""
    return _pipe(["tred"], dot_text, runner)


def render_image(
    dot_text: str,
    output: Union[str, Path],
    *,
    image_format: str = "png",
    reduce: bool = False,
    runner: Runner = subprocess.run,
) -> Path:
    """Gera a imagem final; retorna o caminho escrito."""
    output = Path(output)
    if reduce:
        dot_text = reduce_transitive(dot_text, runner=runner)
    _pipe(["dot", f"-T{image_format}", "-o", str(output)], dot_text, runner)
    return output
