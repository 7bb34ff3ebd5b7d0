"""Core bot logic: conversation handling and scheduling."""
