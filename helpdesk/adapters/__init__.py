"""Adapters de infraestrutura (driven e driving)."""
