# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module reconciles the recorded provenance with the repositories used by the build."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from reposcope.provenance.registry import ProvenanceRegistry, RegistryEntry
from reposcope.provenance.repository import RepositoryDeclaration, RepositoryIdentity

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportEntry:
    """A repository used by the build and the locations declaring it."""

    #: The repository as returned by the dependency resolution.
    repository: RepositoryDeclaration

    #: The locations declaring the repository. Empty if it is not declared anywhere, e.g., Maven Central.
    locations: frozenset[str] = frozenset()

    @property
    def matched(self) -> bool:
        """Return True if at least one location declares the repository."""
        return bool(self.locations)

    def get_dict(self) -> dict:
        """Return the dictionary representation of the entry."""
        return {
            "id": self.repository.id,
            "url": self.repository.url,
            "matched": self.matched,
            "locations": sorted(self.locations),
        }


@dataclass(frozen=True)
class ProvenanceReport:
    """The repositories used by the build of a project, annotated with their provenance."""

    #: The analyzed project.
    project: str

    #: The repositories used by the build, in the order of the dependency resolution.
    entries: tuple[ReportEntry, ...] = ()

    #: Every repository declared in the analyzed POMs and settings, used or not.
    #: Empty unless the declared listing is requested.
    declared: tuple[RegistryEntry, ...] = field(default=())

    #: The number of artifacts whose ancestry has been walked.
    artifact_count: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def unused_declarations(self) -> list[RegistryEntry]:
        """Return the declared repositories that are not used by the build."""
        used = {entry.repository.identity for entry in self.entries}
        return [entry for entry in self.declared if entry.identity not in used]

    def get_dict(self) -> dict:
        """Return the dictionary representation of the report."""
        result: dict = {
            "project": self.project,
            "artifacts": self.artifact_count,
            "repositories": [entry.get_dict() for entry in self.entries],
        }
        if self.declared:
            unused = {entry.identity for entry in self.unused_declarations()}
            result["declared_repositories"] = [
                {
                    **entry.declaration.get_dict(),
                    "used": entry.identity not in unused,
                    "locations": sorted(entry.locations),
                }
                for entry in self.declared
            ]
        return result


class ReportBuilder:
    """Build the report from the repositories used by the build and the recorded provenance."""

    def __init__(self, registry: ProvenanceRegistry) -> None:
        self.registry = registry

    def build(
        self,
        project: str,
        authoritative: Iterable[RepositoryDeclaration],
        show_declared: bool = False,
        artifact_count: int = 0,
    ) -> ProvenanceReport:
        """Annotate each used repository with the locations that declare it.

        The order of ``authoritative`` is kept. A repository not found in the registry is reported with
        no location, which is a normal outcome. A repository listed more than once is reported once, so the
        report has one entry per distinct identity of ``authoritative``.

        Parameters
        ----------
        project : str
            The name of the analyzed project.
        authoritative : Iterable[RepositoryDeclaration]
            The repositories selected by the dependency resolution.
        show_declared : bool
            Whether to add the listing of every declared repository.
        artifact_count : int
            The number of artifacts analyzed.

        Returns
        -------
        ProvenanceReport
            The report.
        """
        entries: list[ReportEntry] = []
        seen: set[RepositoryIdentity] = set()
        for repository in authoritative:
            if repository.identity in seen:
                logger.debug("Repository %s is listed more than once. Skipping ...", repository.identity)
                continue
            seen.add(repository.identity)

            found = self.registry.lookup(repository.identity)
            if found is None:
                logger.debug("No declaration found for repository %s.", repository.identity)
                entries.append(ReportEntry(repository))
            else:
                entries.append(ReportEntry(repository, found.locations))

        declared = tuple(self.registry.entries()) if show_declared else ()
        return ProvenanceReport(project, tuple(entries), declared, artifact_count)
