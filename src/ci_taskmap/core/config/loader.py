# src/ci_taskmap/core/config/loader.py
"""
Loader canônico de documentos do ci-taskmap.

Este módulo é responsável por ler do disco o documento de CI (ex.:
`.cirrus.yml`) e arquivos de opções de render, validando apenas a
estrutura mínima necessária antes que o TaskGraph seja construído.

Responsabilidades do módulo:
    - Carregar arquivos em YAML ou JSON
    - Validar que o root é um mapeamento
    - Normalizar arquivos vazios para `{}`

Princípios fundamentais:
    - O core (TaskGraph, GraphEmitter) nunca faz I/O; só este módulo lê arquivos
    - Erros de entrada são tratados como falhas fatais
    - A mesma entrada sempre produz o mesmo dicionário

Limites explícitos:
    - Não interpreta tasks, aliases ou dependências
    - Não resolve variáveis de ambiente
    - Não aplica defaults de opções (ver `ci_taskmap.core.options`)
"""

from pathlib import Path
from typing import Any, Dict, Union
import json

import yaml  # PyYAML

from .errors import (
    DocumentNotFoundError,
    DocumentSyntaxError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)

PathLike = Union[str, Path]

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}


def _safe_load(stream: Any, *, source: str) -> Any:
    try:
        return yaml.safe_load(stream)
    except yaml.YAMLError as e:
        raise DocumentSyntaxError(f"YAML inválido em '{source}': {e}") from e


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo YAML/JSON e valida sua estrutura básica.

    Decisões arquiteturais:
        - O arquivo deve existir no momento do carregamento
        - O conteúdo raiz deve ser um dicionário (`dict`)
        - Arquivos vazios são interpretados como dicionários vazios
        - YAML é lido com `safe_load` (âncoras e merge keys `<<:` são
          resolvidas pelo PyYAML; tags arbitrárias não são aceitas)

    Raises:
        DocumentNotFoundError: Se o arquivo não existir.
        DocumentSyntaxError: Se o conteúdo não for YAML/JSON válido.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise DocumentNotFoundError(f"Arquivo não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in YAML_SUFFIXES:
        with path.open("r", encoding="utf-8") as f:
            data = _safe_load(f, source=path.name)

    elif suffix in JSON_SUFFIXES:
        with path.open("r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise DocumentSyntaxError(f"JSON inválido em '{path.name}': {e}") from e

    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Root de '{path.name}' deve ser um mapeamento, recebido: {type(data).__name__}"
        )

    return data


def load_document(path: PathLike) -> Dict[str, Any]:
    """
    Carrega o documento de CI que descreve as tasks.

    Args:
        path (str | Path): Caminho para o documento (ex.: `.cirrus.yml`).

    Returns:
        Dict[str, Any]: Documento carregado, pronto para `TaskGraph.build`.
    """
    return _load_file(Path(path))


def parse_document(text: str) -> Dict[str, Any]:
    """
    Interpreta um documento YAML já em memória (ex.: lido de stdin).

    Raises:
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    data = _safe_load(text, source="<stdin>")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Root do documento deve ser um mapeamento, recebido: {type(data).__name__}"
        )
    return data
