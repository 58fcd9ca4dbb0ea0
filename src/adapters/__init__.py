"""Adaptadores de I/O: HTTP (mod.io) y exportación de reportes."""
