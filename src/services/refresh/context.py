"""
Contexte d'une passe de rafraichissement.

Le contexte memorise les elements deja visites pendant la passe : chaque
element n'est rafraichi qu'une fois, meme s'il est atteint par plusieurs
parents (bonus partage entre une serie et une saison par exemple).
"""

import threading

from loguru import logger


class RefreshContext:
    """Ensemble des elements visites pendant la passe courante."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._visited: set[str] = set()

    def try_visit(self, item_id: str) -> bool:
        """
        Marque l'element comme visite.

        Returns:
            True pour le premier appel de la passe, False ensuite
        """
        with self._lock:
            if item_id in self._visited:
                return False
            self._visited.add(item_id)
            return True

    def is_visited(self, item_id: str) -> bool:
        return item_id in self._visited

    def __len__(self) -> int:
        return len(self._visited)

    def reset(self) -> None:
        """Demarre une nouvelle passe (appele sur le signal de blocage)."""
        with self._lock:
            count = len(self._visited)
            self._visited.clear()
        logger.debug(f"Contexte de rafraichissement reinitialise ({count} element(s) oublie(s))")
