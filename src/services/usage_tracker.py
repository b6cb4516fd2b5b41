"""
Suivi d'activite et signal de blocage.

Le UsageTracker compte les traitements en cours (fournisseurs, rafraichissements).
Quand plus aucun traitement n'est actif depuis un certain delai, il emet un
signal "stalled" une seule fois par periode d'inactivite : les proprietaires
d'etat de longue duree (contexte de passe, caches) se reinitialisent alors.
"""

import threading
import time
import uuid
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from loguru import logger


class UsageTracker:
    """
    Compteur d'utilisations actives avec detection d'inactivite.

    Utilisation :
        tracker = UsageTracker(stalled_time_seconds=60)
        tracker.on_stalled(context.reset)
        with tracker.enter("Rafraichissement de l'episode 12"):
            ...
        tracker.check_stalled()  # appele periodiquement par l'hote
    """

    def __init__(
        self,
        stalled_time_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._stalled_time_seconds = stalled_time_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._active: dict[str, str] = {}
        self._last_activity = clock()
        self._stalled = False
        self._callbacks: list[Callable[[], None]] = []

    def on_stalled(self, callback: Callable[[], None]) -> None:
        """Enregistre un callback appele a chaque signal de blocage."""
        self._callbacks.append(callback)

    @property
    def active_count(self) -> int:
        return len(self._active)

    def add(self, name: str) -> str:
        """Declare un traitement actif. Retourne son identifiant de suivi."""
        tracker_id = uuid.uuid4().hex
        with self._lock:
            self._active[tracker_id] = name
            self._last_activity = self._clock()
            self._stalled = False
        logger.trace(f"Suivi ajoute {tracker_id} : {name}")
        return tracker_id

    def remove(self, tracker_id: str) -> None:
        """Declare la fin d'un traitement."""
        with self._lock:
            name = self._active.pop(tracker_id, None)
            self._last_activity = self._clock()
        if name is not None:
            logger.trace(f"Suivi retire {tracker_id} : {name}")

    @contextmanager
    def enter(self, name: str) -> Iterator[str]:
        """Context manager encadrant un traitement actif."""
        tracker_id = self.add(name)
        try:
            yield tracker_id
        finally:
            self.remove(tracker_id)

    def check_stalled(self, now: Optional[float] = None) -> bool:
        """
        Emet le signal de blocage si l'inactivite depasse le delai configure.

        Le signal n'est emis qu'une fois par periode d'inactivite ; toute
        nouvelle activite rearme la detection.

        Returns:
            True si le signal a ete emis par cet appel
        """
        now = self._clock() if now is None else now
        with self._lock:
            if self._stalled or self._active:
                return False
            if now - self._last_activity < self._stalled_time_seconds:
                return False
            self._stalled = True

        logger.debug(f"Inactivite detectee depuis {now - self._last_activity:.0f}s, reinitialisation")
        for callback in self._callbacks:
            callback()
        return True
