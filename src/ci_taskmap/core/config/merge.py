# src/ci_taskmap/core/config/merge.py
"""
Deep-merge determinístico de camadas de opções.

As opções de render são resolvidas em camadas (defaults embutidos,
arquivo de opções, overrides do CLI). Este módulo combina duas camadas
sem mutar nenhuma delas.
"""

from copy import deepcopy
from typing import Any, Dict, Tuple

from .errors import ConfigTypeConflictError

# int/float e list/tuple são intercambiáveis entre camadas
_COMPATIBLE = {(int, float), (float, int), (list, tuple), (tuple, list)}


def _compatible(a: Any, b: Any) -> bool:
    if type(a) is type(b):
        return True
    return (type(a), type(b)) in _COMPATIBLE


def deep_merge(base: Dict[str, Any], override: Dict[str, Any], _path: Tuple[str, ...] = ()) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre duas camadas de opções.

    Política de merge (v1):
        - dict + dict → merge recursivo por chave
        - list        → sobrescrita total (ex.: uma paleta substitui a outra)
        - None        → no override significa "não informado": mantém a base
        - escalar     → sobrescrita direta pelo override
        - conflito de tipos → erro estrutural explícito

    Invariantes:
        - A estrutura retornada é sempre um novo dicionário
        - Chaves não presentes no override são preservadas da base
        - Chaves com valor None na base aceitam qualquer tipo do override

    Args:
        base (Dict[str, Any]): Camada base (ex.: DEFAULT_OPTIONS).
        override (Dict[str, Any]): Camada de maior precedência.

    Returns:
        Dict[str, Any]: Nova configuração resultante.

    Raises:
        ConfigTypeConflictError: Se ocorrer conflito de tipo entre base e override.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if override_value is None:
            result.setdefault(key, None)
            continue

        base_value = result.get(key)
        if base_value is None:
            result[key] = deepcopy(override_value)
            continue

        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value, _path + (str(key),))
            continue

        if not _compatible(base_value, override_value):
            dotted = ".".join(_path + (str(key),))
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{dotted}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result
