"""
Configuration centrale du solveur Mosaic.

Ce fichier contient tous les paramètres configurables de la résolution :
budgets du gouverneur de ressources, heuristiques de recherche et debug.
Chaque clé peut être surchargée par le dict `config` passé au Solver,
ou par un fichier YAML (voir load_config).
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

# Budgets du gouverneur de ressources (une exécution = un appel à solve)
GOVERNOR_CONFIG = {
    'time_budget_ms': 30000,   # Budget temps en millisecondes
    'max_depth': 100,          # Profondeur de récursion maximale de la recherche
    'max_operations': 10000,   # Passes de déduction + nœuds de recherche
}

# Paramètres de la recherche par backtracking
SEARCH_CONFIG = {
    'propagator': 'arc',       # 'arc' (arc-consistance) ou 'count' (règles de comptage)
    'empty_bonus': 1.0,        # Bonus "vide" par contrainte déjà satisfaite
    'ac_check_interval': 256,  # Révisions d'arcs entre deux consultations du gouverneur
}

# Debug et journaux
DEBUG_CONFIG = {
    'debug': False,            # Trace DEBUG de chaque règle / nœud / retour arrière
    'log_dir': None,           # Dossier des journaux JSONL (None = désactivé)
}

PROPAGATORS = ('arc', 'count')

_SECTIONS = {
    'governor': GOVERNOR_CONFIG,
    'search': SEARCH_CONFIG,
    'debug': DEBUG_CONFIG,
}


def default_config() -> Dict[str, Any]:
    """Retourne un dict plat contenant toutes les valeurs par défaut."""
    merged: Dict[str, Any] = {}
    for section in _SECTIONS.values():
        merged.update(section)
    return merged


def merge_config(overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Fusionne des surcharges (dict plat) avec les valeurs par défaut."""
    merged = default_config()
    if overrides:
        unknown = set(overrides) - set(merged)
        if unknown:
            raise ValueError(f"Clés de configuration inconnues : {sorted(unknown)}")
        merged.update(overrides)
    if merged['propagator'] not in PROPAGATORS:
        raise ValueError(
            f"Propagateur inconnu : {merged['propagator']!r} (parmi : {', '.join(PROPAGATORS)})"
        )
    return merged


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Charge un fichier YAML de configuration et le retourne sous forme plate.

    Le fichier contient des sections 'governor', 'search' et/ou 'debug'.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Configuration YAML invalide dans {path}")

    flat: Dict[str, Any] = {}
    for section, values in data.items():
        if section not in _SECTIONS:
            raise ValueError(f"Section de configuration inconnue : {section!r}")
        if not isinstance(values, dict):
            raise ValueError(f"Section {section!r} : dict attendu")
        unknown = set(values) - set(_SECTIONS[section])
        if unknown:
            raise ValueError(f"Section {section!r} : clés inconnues {sorted(unknown)}")
        flat.update(values)
    return merge_config(flat)
