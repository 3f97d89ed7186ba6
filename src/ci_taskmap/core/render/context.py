# src/ci_taskmap/core/render/context.py
"""
Contexto de uma execução de render.

Este módulo define o `RenderContext`, a estrutura canônica que coleta
sinais de observabilidade durante a construção e a emissão de um grafo:
eventos de log estruturados e warnings não fatais.

Princípios fundamentais:
    - Isolamento por execução (cada render possui seu próprio contexto)
    - Logs são eventos estruturados, não texto livre
    - Warnings nunca interrompem o render

Invariantes:
    - Logs sempre incluem `render_id` e `task`
    - Warnings são agrupados por `task`
    - Eventos DEBUG só são registrados quando `debug=True`

Limites explícitos:
    - Não escreve em stdout/stderr (responsabilidade do CLI)
    - Não persiste eventos
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ci_taskmap.core.errors import TaskMapErrorPayload, payloads_to_dicts

# chave usada para eventos e warnings que não pertencem a uma task
GRAPH_SCOPE = "<graph>"


@dataclass
class RenderContext:
    """
    Contexto de uma execução de render.

    O RenderContext consolida:
        - identidade da execução (render_id, created_at)
        - eventos de log estruturados
        - warnings por task, com seus payloads canônicos

    Decisões arquiteturais:
        - O GraphEmitter recebe o contexto explicitamente; não há logger global
        - Payloads de warning mantêm o código estável (ex.: PALETTE_EXHAUSTED)
    """
    render_id: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    debug: bool = False
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)
    payloads: List[TaskMapErrorPayload] = field(default_factory=list, init=False)

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, task: str = GRAPH_SCOPE, level: str, message: str, **extra: Any) -> None:
        if level == "DEBUG" and not self.debug:
            return
        event = {
            "render_id": self.render_id,
            "task": task,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(
        self,
        *,
        task: str = GRAPH_SCOPE,
        message: str,
        payload: Optional[TaskMapErrorPayload] = None,
    ) -> None:
        if task not in self.warnings:
            self.warnings[task] = []
        self.warnings[task].append(message)
        if payload is not None:
            self.payloads.append(payload)
        self.log(task=task, level="WARNING", message=message)

    def warning_dicts(self) -> List[Dict[str, Any]]:
        return payloads_to_dicts(self.payloads)
