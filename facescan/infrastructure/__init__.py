"""Infrastructure adapters: profile stores and detector bridges."""
