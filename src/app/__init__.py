"""App — montagem da interface REST, eventos e observabilidade.

Subpastas:
- bootstrap/: inicialização (logging, validação de settings)
- events/: modelo de evento, registro e derivação de rotas de action
- protocols/: contratos dos colaboradores externos (processador, health)
- observability/: contexto por requisição, métricas via log

Padrão: app monta; api adapta; config configura; utils apoia.
"""
