"""Core del agregador de métricas: excepciones e interfaces de dominio."""
