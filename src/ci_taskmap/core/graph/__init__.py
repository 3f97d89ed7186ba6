# src/ci_taskmap/core/graph/__init__.py
"""
Modelo de dados do grafo de tasks.

Componentes:
    - task       → entidade Task e a variante EnvMatrix
    - matrix     → substituição de `${VAR}`/`$VAR` e sub-labels de matrix
    - task_graph → construção em duas passadas, `find`, start nodes

Invariantes:
    - Nomes internos são únicos no grafo
    - Toda referência em `depends_on` resolve para exatamente uma task
"""
