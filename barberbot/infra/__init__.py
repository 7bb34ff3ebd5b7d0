"""Adapters for external services (WhatsApp Cloud API, Google Calendar)."""
