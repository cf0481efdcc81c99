"""Logger console du solveur (traces DEBUG activables à chaud)."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

LOGGER_NAME = "mosaic_solver"


def get_logger() -> logging.Logger:
    """
    Retourne le logger commun du solveur.

    Si aucun handler n'est configuré, ajoute une sortie console
    au niveau INFO.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] [%(name)s] %(message)s")
        )
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def enable_debug() -> None:
    """Active la trace détaillée (règles, nœuds, retours arrière)."""
    get_logger().setLevel(logging.DEBUG)
    get_logger().debug("Mode debug activé")


def disable_debug() -> None:
    get_logger().setLevel(logging.INFO)


def is_debug_enabled() -> bool:
    return get_logger().isEnabledFor(logging.DEBUG)


@contextmanager
def debug_scope(active: bool) -> Iterator[logging.Logger]:
    """Active la trace DEBUG le temps d'un bloc puis restaure le niveau précédent."""
    logger = get_logger()
    previous = logger.level
    if active:
        enable_debug()
    try:
        yield logger
    finally:
        logger.setLevel(previous)
