# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the walker recording the repositories declared along a chain of parent POMs."""

import logging

from reposcope.errors import CyclicAncestryError
from reposcope.provenance.cancellation import Cancellation
from reposcope.provenance.registry import ProvenanceRegistry
from reposcope.sources.base import Descriptor, DescriptorSource

logger: logging.Logger = logging.getLogger(__name__)


class AncestryWalker:
    """Walk a descriptor and its parents and record every declared repository.

    The walk is iterative so that deep parent chains do not hit the recursion limit. Each call to ``walk``
    keeps its own set of visited coordinates: ancestries shared by several artifacts are walked again,
    which is harmless because recording a repository twice at the same location does not change the registry.
    """

    def __init__(
        self,
        descriptor_source: DescriptorSource,
        registry: ProvenanceRegistry,
        cancellation: Cancellation | None = None,
    ) -> None:
        """Initialize the walker.

        Parameters
        ----------
        descriptor_source : DescriptorSource
            The source used to resolve parent POMs.
        registry : ProvenanceRegistry
            The registry receiving the declarations.
        cancellation : Cancellation | None
            The signal checked before each parent is resolved.
        """
        self.descriptor_source = descriptor_source
        self.registry = registry
        self.cancellation = cancellation or Cancellation()

    def walk(self, descriptor: Descriptor, include_parents: bool = True) -> int:
        """Record the repositories of ``descriptor`` and, if ``include_parents`` is set, of all its parents.

        Parameters
        ----------
        descriptor : Descriptor
            The descriptor where the walk starts.
        include_parents : bool
            Whether the parent chain is followed.

        Returns
        -------
        int
            The number of descriptors visited.

        Raises
        ------
        CyclicAncestryError
            If a parent chain revisits a coordinate.
        DescriptorResolutionError
            If a parent POM cannot be resolved.
        AnalysisCancelledError
            If the analysis is cancelled during the walk.
        """
        visited = [str(descriptor.coordinate)]
        current: Descriptor | None = descriptor
        count = 0

        while current is not None:
            self._record(current)
            count += 1

            if not include_parents or current.parent is None:
                break

            parent = str(current.parent)
            if parent in visited:
                raise CyclicAncestryError(parent, visited)
            visited.append(parent)

            self.cancellation.raise_if_cancelled()
            logger.debug("Following the parent %s of %s.", parent, current.coordinate)
            current = self.descriptor_source.resolve(current.parent)

        return count

    def _record(self, descriptor: Descriptor) -> None:
        for repository in descriptor.repositories:
            logger.debug("Repository %s @ %s", repository.identity, descriptor.location)
            self.registry.record(repository, descriptor.location)
        for repository in descriptor.plugin_repositories:
            logger.debug("Plugin repository %s @ %s", repository.identity, descriptor.location)
            self.registry.record(repository, descriptor.location)
