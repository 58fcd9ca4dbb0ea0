"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: el pipeline depende de un catálogo abstracto,
  no del cliente HTTP de mod.io.
"""
