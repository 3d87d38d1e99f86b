# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module builds the repository provenance report of a project."""

import logging
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait

from reposcope.artifact.maven import MavenCoordinate
from reposcope.errors import AnalysisCancelledError
from reposcope.provenance.ancestry import AncestryWalker
from reposcope.provenance.cancellation import Cancellation
from reposcope.provenance.registry import SETTINGS_LOCATION, ProvenanceRegistry
from reposcope.provenance.report import ProvenanceReport, ReportBuilder
from reposcope.sources.base import DependencyGraphSource, Descriptor, DescriptorSource, MirrorSource

logger: logging.Logger = logging.getLogger(__name__)


def seed_mirrors(registry: ProvenanceRegistry, mirror_source: MirrorSource) -> int:
    """Record the mirrors of the Maven settings in the registry.

    Parameters
    ----------
    registry : ProvenanceRegistry
        The registry.
    mirror_source : MirrorSource
        The source of the mirrors.

    Returns
    -------
    int
        The number of mirrors recorded.
    """
    mirrors = mirror_source.list()
    for mirror in mirrors:
        logger.debug("Mirror %s @ %s", mirror.identity, SETTINGS_LOCATION)
        registry.record(mirror, SETTINGS_LOCATION)
    return len(mirrors)


def build_report(
    project: Descriptor,
    graph_source: DependencyGraphSource,
    descriptor_source: DescriptorSource,
    mirror_source: MirrorSource,
    include_parents: bool = True,
    max_workers: int = 1,
    cancellation: Cancellation | None = None,
    show_declared: bool = False,
) -> ProvenanceReport:
    """Build the report of the repositories used by ``project`` and where they are declared.

    Parameters
    ----------
    project : Descriptor
        The descriptor of the analyzed project. Its own parent chain is always walked.
    graph_source : DependencyGraphSource
        The source of the artifacts and of the repositories used by the build.
    descriptor_source : DescriptorSource
        The source of the POMs of the artifacts and of their parents.
    mirror_source : MirrorSource
        The source of the mirrors of the Maven settings.
    include_parents : bool
        Whether the parent chains of the artifacts are walked.
    max_workers : int
        The maximum number of artifact ancestries walked concurrently.
    cancellation : Cancellation | None
        The signal aborting the analysis.
    show_declared : bool
        Whether to add the listing of every declared repository to the report.

    Returns
    -------
    ProvenanceReport
        The complete report.

    Raises
    ------
    ReposcopeError
        Any failure of the analysis. No partial report is returned.
    """
    cancellation = cancellation or Cancellation()
    registry = ProvenanceRegistry()
    walker = AncestryWalker(descriptor_source, registry, cancellation)

    mirror_count = seed_mirrors(registry, mirror_source)
    logger.info("Recorded %d mirror(s) from the Maven settings.", mirror_count)

    cancellation.raise_if_cancelled()
    logger.info("Walking the parents of %s.", project.coordinate)
    walker.walk(project)

    cancellation.raise_if_cancelled()
    logger.info("Resolving the dependencies of %s.", project.coordinate)
    graph = graph_source.resolve(project)
    logger.info(
        "Found %d artifact(s) resolved from %d repositories.", len(graph.artifacts), len(graph.repositories)
    )

    if max_workers <= 1:
        for artifact in graph.artifacts:
            _walk_artifact(artifact, walker, include_parents)
    else:
        _walk_artifacts_concurrently(list(graph.artifacts), walker, include_parents, max_workers, cancellation)

    cancellation.raise_if_cancelled()
    builder = ReportBuilder(registry)
    return builder.build(
        str(project.coordinate),
        graph.repositories,
        show_declared=show_declared,
        artifact_count=len(graph.artifacts),
    )


def _walk_artifact(artifact: MavenCoordinate, walker: AncestryWalker, include_parents: bool) -> None:
    walker.cancellation.raise_if_cancelled()
    logger.debug("Analyzing the POM of %s.", artifact)
    descriptor = walker.descriptor_source.resolve(artifact)
    walker.walk(descriptor, include_parents)


def _walk_artifacts_concurrently(
    artifacts: list[MavenCoordinate],
    walker: AncestryWalker,
    include_parents: bool,
    max_workers: int,
    cancellation: Cancellation,
) -> None:
    """Walk the ancestries of the artifacts on a bounded thread pool.

    The first failure raises the cancellation signal so that the queued and running walks stop early,
    and is re-raised once all the walks have stopped.
    """
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="reposcope-walk") as executor:
        futures: list[Future] = [
            executor.submit(_walk_artifact, artifact, walker, include_parents) for artifact in artifacts
        ]
        try:
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        except KeyboardInterrupt:
            cancellation.cancel()
            raise
        if any(future.exception() is not None for future in done):
            cancellation.cancel()
        wait(futures)

    failure: BaseException | None = None
    for future in futures:
        error = future.exception()
        if error is None:
            continue
        if not isinstance(error, AnalysisCancelledError):
            raise error
        failure = failure or error

    if failure is not None:
        raise failure
