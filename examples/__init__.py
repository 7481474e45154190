"""Примеры приложений на SDK."""
