"""Configuración compartida."""
