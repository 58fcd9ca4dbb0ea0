"""Servicios del Core (orquestación de la verificación por lotes)."""
