"""HTTP API: WhatsApp webhook and health probes."""
