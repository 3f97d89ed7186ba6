# src/ci_taskmap/core/options.py
"""
Opções explícitas de render do ci-taskmap.

Não existe estado global: toda decisão configurável (redução transitiva,
debug, título, paleta, metadados git) viaja em uma instância imutável de
`RenderOptions`, passada aos construtores do TaskGraph e do GraphEmitter.

Resolução em camadas (maior precedência por último):
    1. DEFAULT_OPTIONS (embutido)
    2. arquivo de opções (YAML/JSON), opcional
    3. overrides explícitos (ex.: flags do CLI)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from ci_taskmap.core.config.errors import UnknownOptionError
from ci_taskmap.core.config.loader import _load_file
from ci_taskmap.core.config.merge import deep_merge
from ci_taskmap.core.render.palette import DEFAULT_PALETTE, FALLBACK_COLOR


DEFAULT_OPTIONS: Dict[str, Any] = {
    "reduce": False,
    "debug": False,
    "verbose": False,
    "title": True,
    "fail_on_cycle": False,
    "palette": list(DEFAULT_PALETTE),
    "fallback_color": FALLBACK_COLOR,
    "repo": None,
    "branch": None,
    "rev": None,
    "image_format": "png",
}


@dataclass(frozen=True)
class RenderOptions:
    """
    Configuração resolvida de uma execução.

    Campos:
        - reduce: encaminhar o DOT ao `tred` antes do layout
        - debug: registrar eventos DEBUG no RenderContext
        - verbose: o CLI imprime os eventos registrados
        - title: emitir a linha de título `<repo>: <branch> @ <rev>`
        - fail_on_cycle: tratar ciclos de dependência como erro fatal
        - palette: cores consumidas em ordem, uma por task descoberta
        - fallback_color: cor usada quando a paleta se esgota
        - repo/branch/rev: metadados git opacos (usados quando nenhum
          GitMetadataProvider é injetado)
        - image_format: formato passado ao `dot -T`
    """

    reduce: bool = False
    debug: bool = False
    verbose: bool = False
    title: bool = True
    fail_on_cycle: bool = False
    palette: Tuple[str, ...] = field(default=DEFAULT_PALETTE)
    fallback_color: str = FALLBACK_COLOR
    repo: Optional[str] = None
    branch: Optional[str] = None
    rev: Optional[str] = None
    image_format: str = "png"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderOptions":
        unknown = sorted(set(data) - set(DEFAULT_OPTIONS))
        if unknown:
            raise UnknownOptionError(f"Opções desconhecidas: {', '.join(unknown)}")
        merged = deep_merge(DEFAULT_OPTIONS, data)
        merged["palette"] = tuple(str(c) for c in merged["palette"])
        return cls(**merged)


def load_options(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> RenderOptions:
    """
    Resolve as opções efetivas a partir das três camadas.

    Args:
        path: Arquivo de opções opcional. Quando informado, deve existir.
        overrides: Valores de maior precedência; `None` significa "não informado".

    Raises:
        DocumentNotFoundError: Se `path` for informado e não existir.
        UnknownOptionError: Se alguma camada trouxer chaves desconhecidas.
        ConfigTypeConflictError: Se alguma camada trouxer tipo incompatível.
    """
    layer: Dict[str, Any] = {}
    if path is not None:
        layer = _load_file(Path(path))
    if overrides:
        layer = deep_merge(layer, overrides)
    return RenderOptions.from_dict(layer)
