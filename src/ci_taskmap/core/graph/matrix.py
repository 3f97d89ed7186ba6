# src/ci_taskmap/core/graph/matrix.py
"""
Expansão de matrizes de variantes e de ambiente em sub-labels.

Uma matrix NÃO cria nós adicionais no grafo: ela apenas descreve as
variações de uma mesma task. Este módulo produz as linhas de texto que o
GraphEmitter coloca dentro de um nó do tipo `record`.

Substituição de nomes:
    O nome exibido de cada variante pode conter referências `${VAR}` ou
    `$VAR`. Elas são resolvidas contra três escopos de ambiente aplicados
    em ordem (documento → task → item da matrix; o último vence).

    A expansão é feita em exatamente duas passadas: uma variável cujo
    valor referencia outra variável é resolvida, mas indireções mais
    profundas permanecem como texto literal.

Limites explícitos:
    - Não avalia expressões de shell (`$(cmd)`, `${VAR:-x}`, ...)
    - Não altera a topologia do grafo
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

LINE_BREAK = "\\l"
UNKNOWN_NAME = "?"
ENV_VALUE_SEPARATOR = ", "
EXPANSION_PASSES = 2

_BRACED_VAR = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")
_BARE_VAR = re.compile(r"\$([A-Z_][A-Z0-9_]*)")


def _stringify(value: Any) -> str:
    # YAML booleans chegam como bool; o CI os enxerga como texto minúsculo
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def merge_env(*scopes: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Sobrepõe escopos de ambiente em ordem; valores None são descartados."""
    merged: Dict[str, str] = {}
    for scope in scopes:
        if not scope:
            continue
        for key, value in scope.items():
            if key == "matrix" or value is None:
                continue
            merged[str(key)] = _stringify(value)
    return merged


def substitute_once(text: str, env: Mapping[str, str]) -> str:
    """Uma passada: primeiro `${VAR}`, depois `$VAR`. Tokens sem valor ficam intactos."""

    def _replace(match: "re.Match[str]") -> str:
        return env.get(match.group(1), match.group(0))

    text = _BRACED_VAR.sub(_replace, text)
    return _BARE_VAR.sub(_replace, text)


def substitute(text: str, env: Mapping[str, str]) -> str:
    for _ in range(EXPANSION_PASSES):
        text = substitute_once(text, env)
    return text


def expand_name(
    item: Mapping[str, Any],
    *,
    document_env: Optional[Mapping[str, Any]] = None,
    task_env: Optional[Mapping[str, Any]] = None,
    configured_name: Optional[str] = None,
    task_name: Optional[str] = None,
) -> str:
    """
    Resolve o nome exibido de um item de matrix.

    Ordem do nome base:
        1. `name` do próprio item
        2. `name` configurado na task
        3. nome interno da task
        4. `?`

    Exemplo:
        >>> expand_name({}, document_env={"FOO": "1"}, configured_name="build-${FOO}")
        'build-1'
    """
    item_env = item.get("env") if isinstance(item.get("env"), Mapping) else None
    env = merge_env(document_env, task_env, item_env)

    base = item.get("name") or configured_name or task_name or UNKNOWN_NAME
    return substitute(str(base), env)


def variant_lines(
    items: Sequence[Mapping[str, Any]],
    *,
    document_env: Optional[Mapping[str, Any]] = None,
    task_env: Optional[Mapping[str, Any]] = None,
    configured_name: Optional[str] = None,
    task_name: Optional[str] = None,
) -> List[str]:
    return [
        expand_name(
            item,
            document_env=document_env,
            task_env=task_env,
            configured_name=configured_name,
            task_name=task_name,
        )
        + LINE_BREAK
        for item in items
    ]


def env_matrix_lines(tuples: Iterable[Mapping[str, Any]]) -> List[str]:
    """
    Uma linha por variável: `VAR: v1, v2\\l`, variáveis em ordem alfabética.

    Os valores seguem a ordem das tuplas; tuplas sem a variável são puladas.
    """
    values: Dict[str, List[str]] = {}
    for entry in tuples:
        for key, value in entry.items():
            values.setdefault(str(key), []).append("" if value is None else _stringify(value))

    return [
        f"{var}: {ENV_VALUE_SEPARATOR.join(values[var])}{LINE_BREAK}"
        for var in sorted(values)
    ]
