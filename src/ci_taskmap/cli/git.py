# src/ci_taskmap/cli/git.py
"""Metadados do repositório obtidos executando `git` no diretório do documento."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Union

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def repo_from_url(url: str) -> Optional[str]:
    """
    Extrai `owner/name` de uma URL de remote.

    >>> repo_from_url("git@github.com:containers/podman.git")
    'containers/podman'
    >>> repo_from_url("https://github.com/containers/podman")
    'containers/podman'
    """
    url = url.strip()
    if not url:
        return None
    if url.endswith(".git"):
        url = url[: -len(".git")]
    url = url.rstrip("/")
    if "://" not in url and ":" in url:
        # forma scp: git@host:owner/name
        url = url.split(":", 1)[1]
    parts = [p for p in url.split("/") if p]
    if len(parts) >= 2:
        return "/".join(parts[-2:])
    return parts[-1] if parts else None


class GitCommandMetadata:
    """GitMetadataProvider que consulta o `git`; falhas viram None."""

    def __init__(self, cwd: Union[str, Path] = ".", runner: Runner = subprocess.run):
        self.cwd = Path(cwd)
        self._run = runner

    def _git(self, *args: str) -> Optional[str]:
        command: List[str] = ["git", *args]
        try:
            result = self._run(
                command,
                cwd=str(self.cwd),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError:
            return None
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def repo(self) -> Optional[str]:
        url = self._git("remote", "get-url", "origin")
        if url:
            return repo_from_url(url)
        toplevel = self._git("rev-parse", "--show-toplevel")
        return Path(toplevel).name if toplevel else None

    def branch(self) -> Optional[str]:
        return self._git("rev-parse", "--abbrev-ref", "HEAD")

    def rev(self) -> Optional[str]:
        return self._git("rev-parse", "--short", "HEAD")
