# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the registry mapping each repository to the locations that declare it."""

import logging
import threading
from dataclasses import dataclass

from reposcope.provenance.repository import RepositoryDeclaration, RepositoryIdentity

logger: logging.Logger = logging.getLogger(__name__)

#: The location recorded for the mirrors defined in the Maven settings files.
SETTINGS_LOCATION = "settings (user/global)"


@dataclass(frozen=True)
class RegistryEntry:
    """A snapshot of one repository in the registry."""

    #: The identity of the repository.
    identity: RepositoryIdentity

    #: The first declaration recorded for the identity.
    declaration: RepositoryDeclaration

    #: The locations of the descriptors declaring the repository.
    locations: frozenset[str]


class _MutableEntry:
    """The mutable registry entry, guarded by its own lock."""

    __slots__ = ("declaration", "locations", "lock")

    def __init__(self, declaration: RepositoryDeclaration) -> None:
        self.declaration = declaration
        self.locations: set[str] = set()
        self.lock = threading.Lock()

    def snapshot(self) -> RegistryEntry:
        with self.lock:
            return RegistryEntry(self.declaration.identity, self.declaration, frozenset(self.locations))


class ProvenanceRegistry:
    """The mapping from repository identities to the set of locations that declared them.

    Entries are kept in the order in which their identity was first recorded and are never removed.
    ``record`` can be called concurrently: the entry table is guarded by a lock only while an identity is
    looked up or inserted, and each entry guards its own location set.
    """

    def __init__(self) -> None:
        self._entries: dict[RepositoryIdentity, _MutableEntry] = {}
        self._lock = threading.Lock()

    def record(self, declaration: RepositoryDeclaration, location: str) -> None:
        """Record that the repository of ``declaration`` is declared at ``location``.

        The metadata of the first declaration recorded for an identity is kept. Later declarations
        with the same identity only add their location.

        Parameters
        ----------
        declaration : RepositoryDeclaration
            The repository declaration.
        location : str
            The location of the descriptor declaring the repository.
        """
        with self._lock:
            entry = self._entries.get(declaration.identity)
            if entry is None:
                entry = _MutableEntry(declaration)
                self._entries[declaration.identity] = entry

        with entry.lock:
            entry.locations.add(location)

    def lookup(self, identity: RepositoryIdentity) -> RegistryEntry | None:
        """Return the entry recorded for ``identity`` or None if the identity has never been recorded."""
        with self._lock:
            entry = self._entries.get(identity)
        if entry is None:
            return None
        return entry.snapshot()

    def entries(self) -> list[RegistryEntry]:
        """Return all the entries ordered by the time their identity was first recorded."""
        with self._lock:
            entries = list(self._entries.values())
        return [entry.snapshot() for entry in entries]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._entries
