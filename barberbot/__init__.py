"""Barbearia TwoWell WhatsApp booking bot."""

__version__ = "1.0.0"
