"""Excepciones del pipeline de parsing."""

from __future__ import annotations


class IngestError(Exception):
    """Base de todas las excepciones del servicio."""


class ConfigurationError(IngestError):
    """Configuración inválida detectada al construir un componente.

    Es fatal: se lanza antes de procesar cualquier mensaje.
    """

    def __init__(self, option: str, value: object, allowed: tuple[str, ...] = ()):
        self.option = option
        self.value = value
        self.allowed = allowed
        message = f"Unknown {option} '{value}'"
        if allowed:
            message += f" (expected one of: {', '.join(allowed)})"
        super().__init__(message)


class PayloadDecodeError(IngestError, ValueError):
    """Payload que no pudo decodificarse (UTF-8 o JSON).

    Error local al mensaje: el caller lo registra y continúa.
    """

    def __init__(self, reason: str, payload_preview: str = ""):
        self.reason = reason
        self.payload_preview = payload_preview
        super().__init__(f"Invalid payload: {reason}")
