# src/ci_taskmap/core/__init__.py
"""
Core do ci-taskmap.

Este pacote contém a parte do ci-taskmap com modelo de dados e algoritmo:
transformar um documento de CI já carregado em um grafo de dependências
entre tasks e emitir sua descrição DOT.

O core é projetado para ser:
    - determinístico (mesma entrada, mesmo texto DOT)
    - testável de forma isolada
    - livre de I/O de processo: não executa `git`, `tred` nem `dot`

Componentes principais:
    - config   → leitura de documentos, merge de opções, hashing
    - options  → RenderOptions (configuração explícita, sem estado global)
    - graph    → Task, Matrix Expander e TaskGraph
    - render   → GraphEmitter e RenderContext
    - metadata → GitMetadataProvider e título do diagrama

Erros estruturais do grafo abortam a construção; erros cosméticos são
registrados como warnings no RenderContext.
"""
