"""Rotas HTTP da API.

Responsabilidades:
- GET /health: liveness
- POST /<path derivado>: uma rota por evento com action

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
