# src/ci_taskmap/core/render/__init__.py
"""
Render do ci-taskmap.

Este pacote transforma um TaskGraph já construído em uma descrição de
grafo no formato DOT, consumível pelo `tred` e pelo `dot` do Graphviz.

Componentes principais:
    - emitter → caminhada em profundidade a partir dos start nodes,
                uma cor por cadeia, um nó por task
    - context → eventos estruturados e warnings de uma execução
    - palette → cores padrão e cor de fallback

Invariantes:
    - Cada task aparece exatamente uma vez como nó
    - Cada aresta tem a cor do nó de origem
    - A mesma entrada (grafo + paleta) produz sempre o mesmo texto

Limites explícitos:
    - Não faz layout nem rasteriza imagens
    - Não executa ferramentas externas
"""
