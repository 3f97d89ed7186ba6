# tests/conftest.py
"""
Fixtures compartilhados para testes do ci-taskmap.

Este módulo define fixtures reutilizáveis que fornecem:
- documentos de CI mínimos e determinísticos (já carregados, como dict)
- um documento YAML semelhante a um `.cirrus.yml` real (como string)
- opções de render com paleta curta e sem título
- contexto de render controlado (RenderContext)

O objetivo destas fixtures é permitir testes do core (graph e render)
sem depender de:
- filesystem
- `git`, `tred` ou `dot`
- variáveis de ambiente

Decisões arquiteturais:
    - Documentos são dicts já resolvidos sempre que o teste não é sobre YAML
    - Imports do core são realizados de forma lazy para melhorar a
      clareza de erros durante falhas
    - A paleta de teste é curta e legível (blue, red, green, ...)

Invariantes:
    - Nenhuma fixture realiza I/O
    - Todas as fixtures são seguras para execução em paralelo
"""

import pytest
from datetime import datetime, timezone


TEST_PALETTE = ("blue", "red", "green", "orange", "purple", "brown")


# =====================================================
# Documentos de CI
# =====================================================

@pytest.fixture
def linear_document() -> dict:
    """
    Documento com uma cadeia linear `lint → build → test`.

    É o menor documento que exercita start node, arestas diretas e a
    ordem de travessia.

    Returns:
        dict: Documento já carregado.
    """
    return {
        "lint_task": {},
        "build_task": {"depends_on": ["lint"]},
        "test_task": {"depends_on": ["build"]},
    }


@pytest.fixture
def diamond_document() -> dict:
    """Documento em diamante: `a → (b, c) → d`; `d` é alcançável por dois caminhos."""
    return {
        "a_task": {},
        "b_task": {"depends_on": ["a"]},
        "c_task": {"depends_on": ["a"]},
        "d_task": {"depends_on": ["b", "c"]},
    }


@pytest.fixture
def alias_document() -> dict:
    """
    Documento onde dependências são declaradas por alias.

    - `validate_task` tem alias `checks`
    - `build_task` depende de `checks` (alias) e `docs` (nome)
    - `task` genérica com alias `success` depende de `build`
    """
    return {
        "validate_task": {"alias": "checks"},
        "docs_task": {},
        "build_task": {"depends_on": ["checks", "docs"]},
        "task": {"alias": "success", "depends_on": ["build"]},
    }


@pytest.fixture
def cirrus_like_yaml() -> str:
    """
    YAML semelhante a um `.cirrus.yml` real.

    Contém ambiente global, âncoras YAML, matrix de variantes com nomes
    parametrizados, matrix de ambiente e tasks que dependem por alias.

    Returns:
        str: Conteúdo YAML.
    """
    return """\
env:
    DISTRO: fedora
    RELEASE: "39"
    IMAGE: "${DISTRO}-${RELEASE}"

gcp_credentials: ENCRYPTED[abc]

ext_svc_check_task:
    alias: ext_svc_check
    name: "Ext. services"

validate_task:
    alias: validate
    name: "Validate $DISTRO"
    depends_on:
        - ext_svc_check

build_task:
    alias: build
    name: "Build for $IMAGE"
    depends_on:
        - validate
    matrix:
        - name: "Build ${DISTRO}"
        - name: "Build debian"
          env:
            DISTRO: debian

unit_test_task:
    alias: unit_test
    depends_on:
        - build
    env:
        matrix:
            - PODBIN: podman
              PRIV: root
            - PODBIN: podman
              PRIV: rootless
            - PODBIN: docker
              PRIV: root

success_task:
    alias: success
    depends_on:
        - unit_test
        - validate
"""


# =====================================================
# Opções e contexto
# =====================================================

@pytest.fixture
def test_options():
    """
    Opções de render para testes: sem título e paleta curta.

    O título depende de metadados git; testes que não são sobre o título
    o desligam para manter o DOT esperado curto.
    """
    from ci_taskmap.core.options import RenderOptions

    return RenderOptions(title=False, palette=TEST_PALETTE)


@pytest.fixture
def render_ctx():
    """
    RenderContext determinístico com DEBUG habilitado.

    `render_id` e `created_at` são fixos; eventos DEBUG são registrados
    para que testes possam inspecionar a travessia.
    """
    from ci_taskmap.core.render.context import RenderContext

    return RenderContext(
        render_id="render-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        debug=True,
        meta={"source": "pytest"},
    )
