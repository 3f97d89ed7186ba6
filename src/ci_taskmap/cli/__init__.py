# src/ci_taskmap/cli/__init__.py
"""
Colaborador externo do core: linha de comando, `git`, `tred` e `dot`.

Tudo o que envolve processos externos vive aqui; o core apenas recebe
um documento carregado e devolve texto DOT.
"""
