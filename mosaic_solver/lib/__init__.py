"""Briques du solveur : s0 modèle → s1 gouverneur → s2 propagation → s3 recherche → s4 orchestration."""
