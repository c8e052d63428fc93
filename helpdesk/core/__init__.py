"""
Core Domain Layer - O Hexágono.

Lógica de negócio pura, sem dependências de frameworks:
- Zero imports de Django ou Celery
- Testável sem banco de dados
"""
