# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module defines the sources the provenance analysis obtains its inputs from."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from reposcope.artifact.maven import MavenCoordinate
from reposcope.provenance.repository import RepositoryDeclaration


@dataclass(frozen=True)
class Descriptor:
    """A build descriptor (POM) and the repositories it declares itself."""

    #: The coordinate of the project described.
    coordinate: MavenCoordinate

    #: The absolute path of the POM file, or the URL it was downloaded from.
    location: str

    repositories: tuple[RepositoryDeclaration, ...] = ()
    plugin_repositories: tuple[RepositoryDeclaration, ...] = ()

    #: The coordinate of the parent POM, if any.
    parent: MavenCoordinate | None = None

    #: The ``<relativePath>`` of the parent. None when the parent lookup on disk is disabled.
    parent_relative_path: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class DependencyGraph:
    """The result of the dependency resolution of a project."""

    #: The artifacts reachable from the project, in resolution order.
    artifacts: tuple[MavenCoordinate, ...] = ()

    #: The repositories actually selected by the dependency resolution, in resolution order.
    repositories: tuple[RepositoryDeclaration, ...] = ()


class DescriptorSource(ABC):
    """The source of the build descriptors of Maven coordinates."""

    @abstractmethod
    def resolve(self, coordinate: MavenCoordinate) -> Descriptor:
        """Return the descriptor of ``coordinate``.

        Parameters
        ----------
        coordinate : MavenCoordinate
            The coordinate of the artifact.

        Returns
        -------
        Descriptor
            The descriptor.

        Raises
        ------
        DescriptorResolutionError
            If the descriptor cannot be obtained or parsed.
        AnalysisCancelledError
            If the analysis is cancelled while the descriptor is downloaded.
        """


class DependencyGraphSource(ABC):
    """The source of the dependency graph of a project."""

    @abstractmethod
    def resolve(self, project: Descriptor) -> DependencyGraph:
        """Resolve the artifacts and the repositories used by ``project``.

        Parameters
        ----------
        project : Descriptor
            The descriptor of the analyzed project.

        Returns
        -------
        DependencyGraph
            The artifacts and the authoritative repositories.

        Raises
        ------
        GraphResolutionError
            If the dependency graph cannot be computed.
        """


class MirrorSource(ABC):
    """The source of the mirror definitions of the Maven settings."""

    @abstractmethod
    def list(self) -> list[RepositoryDeclaration]:
        """Return the mirror declarations, in the order they are defined."""


class NoneMirrorSource(MirrorSource):
    """A mirror source without any mirror."""

    def list(self) -> list[RepositoryDeclaration]:
        return []
