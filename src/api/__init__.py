"""API — camada de borda HTTP.

Responsabilidades:
- Correlacionar requisições (request_id + logger vinculado)
- Decodificar body JSON e interceptar falhas de parse
- Expor health check e actions derivadas do registro de eventos
- Normalizar falhas em envelope JSON

Subpastas:
- middleware/: pipeline (correlação, body JSON, normalização de erros)
- routes/: endpoints HTTP (health, actions)

NÃO PODE conter: definição de eventos nem processamento de eventos.
"""
