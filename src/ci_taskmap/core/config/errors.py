# src/ci_taskmap/core/config/errors.py
"""
Exceções canônicas da camada de configuração do ci-taskmap.

Este módulo define a hierarquia de exceções utilizadas durante o
carregamento do documento de CI e a resolução das opções de render.

As exceções aqui definidas representam falhas de entrada (arquivo
ausente, formato desconhecido, estrutura inválida), e não falhas do
grafo de tasks; estas vivem em `ci_taskmap.core.exceptions`.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Erros de entrada são tratados como falhas fatais
    - Mensagens de erro nomeiam o arquivo ou a chave problemática
"""


class ConfigError(Exception):
    """
    Exceção base para erros de carregamento e resolução de configuração.

    Permite ao CLI capturar de forma genérica qualquer falha de entrada
    e distingui-la de falhas estruturais do grafo.
    """


class DocumentNotFoundError(ConfigError):
    """
    Exceção levantada quando o documento de CI (ou arquivo de opções)
    não existe no caminho especificado.

    Limites explícitos:
        - Não tenta procurar o arquivo em outros diretórios
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando a extensão do arquivo não é suportada.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando o conteúdo raiz do documento não é um
    mapeamento (`dict`).

    Um documento de CI é sempre um mapa de chaves (`*_task`, `env`,
    `name`, ...) para valores; listas ou escalares no root são inválidos.
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge
    das opções de render.

    Exemplo de conflito:
        - defaults: {"palette": ["blue", "red"]}
        - override: {"palette": "blue"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """


class UnknownOptionError(ConfigError):
    """Chave de opção de render não reconhecida."""


class DocumentSyntaxError(ConfigError):
    """O documento não é YAML/JSON sintaticamente válido."""
