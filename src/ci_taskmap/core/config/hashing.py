# src/ci_taskmap/core/config/hashing.py
"""
Identidade determinística do documento de CI.

O hash do documento acompanha o RenderResult para que dois diagramas
possam ser comparados sem reprocessar o YAML de origem.
"""

import hashlib
import json
from typing import Any, Dict


def _normalize_keys(value: Any) -> Any:
    # YAML aceita chaves bool/int (`on:`, `1:`); JSON exige strings ordenáveis
    if isinstance(value, dict):
        return {str(k): _normalize_keys(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_keys(v) for v in value]
    return value


def canonical_json(document: Dict[str, Any]) -> str:
    """
    Serializa o documento em JSON canônico.

    Chaves não-string (ex.: `on:` vira `True` no YAML) são convertidas com
    `str` antes da ordenação. Valores que o YAML produz mas o JSON não
    representa (datas, timestamps) também passam por `str`.
    """
    return json.dumps(
        _normalize_keys(document),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def compute_config_hash(document: Dict[str, Any]) -> str:
    """
    Gera um hash SHA-256 do documento de CI já carregado.

    Invariantes:
        - O valor retornado é uma string hexadecimal de 64 caracteres
        - Documentos estruturalmente equivalentes produzem o mesmo hash,
          independentemente da ordem original das chaves

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """
    if not isinstance(document, dict):
        raise TypeError(
            f"Documento para hashing deve ser dict, recebido: {type(document).__name__}"
        )

    return hashlib.sha256(canonical_json(document).encode("utf-8")).hexdigest()
