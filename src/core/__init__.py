"""Core: dominio, configuración y pipeline de verificación (sin I/O de terminal)."""
