# src/ci_taskmap/core/config/__init__.py

"""
Camada de configuração do ci-taskmap.

Este pacote reúne tudo o que acontece antes do TaskGraph existir:
leitura do documento de CI, resolução em camadas das opções de render
e identidade (hash) do documento carregado.

Responsabilidades do pacote:
    - Carregamento de arquivos YAML/JSON (`loader`)
    - Deep-merge determinístico de camadas de opções (`merge`)
    - Hash canônico do documento (`hashing`)
    - Hierarquia de erros de entrada (`errors`)

Limites explícitos:
    - Não interpreta tasks nem dependências
    - Não depende de CLI, git ou ferramentas externas
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DocumentNotFoundError,
    DocumentSyntaxError,
    InvalidConfigRootTypeError,
    UnknownOptionError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .loader import load_document, parse_document
from .merge import deep_merge

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DocumentNotFoundError",
    "DocumentSyntaxError",
    "InvalidConfigRootTypeError",
    "UnknownOptionError",
    "UnsupportedConfigFormatError",
    "compute_config_hash",
    "deep_merge",
    "load_document",
    "parse_document",
]
