"""Shared utilities: validations, parallelism, seeds, timing.

Componentes expostos
--------------------
- `checks` → validação de entradas (amostra, B, workers, nível).
- `parallel` → execução paralela com falha total e pool com escopo.
- `seed` → controle determinístico de seeds por worker.
- `timing` → medição de duração dos runs.
"""
