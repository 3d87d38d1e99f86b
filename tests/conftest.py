# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Fixtures for tests."""
from collections.abc import Iterator
from pathlib import Path

import pytest

from reposcope.artifact.maven import MavenCoordinate
from reposcope.config.defaults import defaults, load_defaults
from reposcope.config.global_config import global_config
from reposcope.errors import DescriptorResolutionError
from reposcope.provenance.repository import RepositoryDeclaration
from reposcope.sources.base import DependencyGraph, DependencyGraphSource, Descriptor, DescriptorSource, MirrorSource

# We need to pass fixture names as arguments to maintain an order.
# pylint: disable=redefined-outer-name


class FakeDescriptorSource(DescriptorSource):
    """A descriptor source serving descriptors from memory.

    ``max_steps`` bounds the number of resolutions so that a walk that does not detect a cycle fails the test
    instead of running forever.
    """

    def __init__(self, descriptors: list[Descriptor] | None = None, max_steps: int = 1000) -> None:
        self.descriptors = {descriptor.coordinate: descriptor for descriptor in descriptors or []}
        self.max_steps = max_steps
        self.resolved: list[MavenCoordinate] = []

    def resolve(self, coordinate: MavenCoordinate) -> Descriptor:
        self.resolved.append(coordinate)
        if len(self.resolved) > self.max_steps:
            raise RuntimeError(f"More than {self.max_steps} resolutions, the walk does not terminate.")
        try:
            return self.descriptors[coordinate]
        except KeyError as error:
            raise DescriptorResolutionError(str(coordinate), "not found") from error


class FakeGraphSource(DependencyGraphSource):
    """A dependency graph source returning a fixed graph."""

    def __init__(
        self,
        artifacts: list[MavenCoordinate] | None = None,
        repositories: list[RepositoryDeclaration] | None = None,
    ) -> None:
        self.graph = DependencyGraph(tuple(artifacts or []), tuple(repositories or []))

    def resolve(self, project: Descriptor) -> DependencyGraph:
        return self.graph


class FakeMirrorSource(MirrorSource):
    """A mirror source returning fixed mirrors."""

    def __init__(self, mirrors: list[RepositoryDeclaration] | None = None) -> None:
        self.mirrors = mirrors or []

    def list(self) -> list[RepositoryDeclaration]:
        return list(self.mirrors)


@pytest.fixture()
def test_dir() -> Path:
    """Set the root test_dir path.

    Returns
    -------
    Path
        The root path to the test directory.
    """
    return Path(__file__).parent


@pytest.fixture(autouse=True)
def setup_test() -> Iterator[None]:
    """Load the packaged defaults before each test and reset them afterwards.

    Remote requests are not retried so that failing requests do not slow the tests down.
    """
    load_defaults("")
    defaults.set("requests", "error_retries", "0")
    defaults.set("requests", "retry_delay", "0")
    yield
    defaults.clear()
    global_config.output_path = ""
    global_config.local_maven_repo = None
    global_config.settings_paths = []


@pytest.fixture()
def fake_sources() -> tuple[type[FakeDescriptorSource], type[FakeGraphSource], type[FakeMirrorSource]]:
    """Return the in-memory source classes."""
    return FakeDescriptorSource, FakeGraphSource, FakeMirrorSource

