# src/ci_taskmap/core/metadata.py
"""
Metadados de repositório usados no título do diagrama.

O core nunca executa `git`: ele recebe um `GitMetadataProvider` pronto.
Os valores são strings opacas; ausência é representada por None.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from ci_taskmap.core.options import RenderOptions


@runtime_checkable
class GitMetadataProvider(Protocol):
    def repo(self) -> Optional[str]: ...

    def branch(self) -> Optional[str]: ...

    def rev(self) -> Optional[str]: ...


@dataclass(frozen=True)
class StaticGitMetadata:
    """Provider com valores fixos (opções, testes, CI com variáveis já conhecidas)."""

    repo_name: Optional[str] = None
    branch_name: Optional[str] = None
    revision: Optional[str] = None

    @classmethod
    def from_options(cls, options: RenderOptions) -> "StaticGitMetadata":
        return cls(repo_name=options.repo, branch_name=options.branch, revision=options.rev)

    def repo(self) -> Optional[str]:
        return self.repo_name

    def branch(self) -> Optional[str]:
        return self.branch_name

    def rev(self) -> Optional[str]:
        return self.revision


class ChainedGitMetadata:
    """Consulta providers em ordem; por campo, o primeiro valor não vazio vence."""

    def __init__(self, *providers: Optional[GitMetadataProvider]):
        self.providers = [p for p in providers if p is not None]

    def _first(self, attr: str) -> Optional[str]:
        for provider in self.providers:
            value = getattr(provider, attr)()
            if value:
                return value
        return None

    def repo(self) -> Optional[str]:
        return self._first("repo")

    def branch(self) -> Optional[str]:
        return self._first("branch")

    def rev(self) -> Optional[str]:
        return self._first("rev")


def format_title(provider: GitMetadataProvider) -> str:
    """`<repo>: <branch> @ <rev>`, com placeholders para valores ausentes."""
    repo = provider.repo() or "(unknown repo)"
    branch = provider.branch() or "(unknown branch)"
    rev = provider.rev() or "(unknown rev)"
    return f"{repo}: {branch} @ {rev}"
