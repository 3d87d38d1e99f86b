# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the source of POMs backed by the project files and by Maven repositories."""

import logging
import os
import threading
import urllib.parse

from reposcope.artifact.maven import MavenCoordinate, construct_pom_path
from reposcope.config.defaults import defaults
from reposcope.errors import ConfigurationError, DescriptorResolutionError, MalformedCoordinateError, ParseError
from reposcope.parsers.pomparser import read_descriptor
from reposcope.provenance.cancellation import Cancellation
from reposcope.sources.base import Descriptor, DescriptorSource
from reposcope.util import send_get_http_raw

logger: logging.Logger = logging.getLogger(__name__)


class MavenDescriptorSource(DescriptorSource):
    """Resolve POMs like Maven does.

    A coordinate is looked up, in order, in the POMs of the analyzed project found through the ``<relativePath>``
    of their children, in the local Maven repository, and then in each remote repository.
    """

    def __init__(
        self,
        local_repository: str | None = None,
        remote_repositories: list[str] | None = None,
        cancellation: Cancellation | None = None,
    ) -> None:
        """Initialize the source.

        Parameters
        ----------
        local_repository : str | None
            The path to the local Maven repository, e.g., ``~/.m2/repository``.
        remote_repositories : list[str] | None
            The base urls of the remote repositories.
        cancellation : Cancellation | None
            The signal that bounds the downloads and their retries.
        """
        self.local_repository = local_repository
        self.remote_repositories: list[str] = remote_repositories or []
        self.cancellation = cancellation
        self._project_poms: dict[MavenCoordinate, str] = {}
        self._lock = threading.Lock()

    def load_defaults(self) -> None:
        """Load the remote repositories and the local repository from the ``[maven]`` section of the .ini configuration.

        Values passed to the constructor take precedence.

        Raises
        ------
        ConfigurationError
            If a remote repository url is not an http(s) url.
        """
        if not self.remote_repositories:
            self.remote_repositories = defaults.get_list(
                "maven", "remote_repositories", fallback=["https://repo.maven.apache.org/maven2"]
            )
        for repository in self.remote_repositories:
            if urllib.parse.urlparse(repository).scheme not in {"http", "https"}:
                raise ConfigurationError(
                    f'The remote repository "{repository}" in section [maven] of the .ini configuration file '
                    "is not an http(s) url."
                )

        if self.local_repository is None:
            local_repository = defaults.get("maven", "local_repository", fallback="")
            if not local_repository:
                local_repository = os.path.join(os.path.expanduser("~"), ".m2", "repository")
            if os.path.isdir(local_repository):
                self.local_repository = local_repository
            else:
                logger.debug("The local Maven repository at %s does not exist. Ignore ...", local_repository)

    def load(self, pom_path: str) -> Descriptor:
        """Load the POM of a project from the disk.

        The parent POMs found on the disk through ``<relativePath>`` are registered so that ``resolve``
        returns them instead of the published ones.

        Parameters
        ----------
        pom_path : str
            The path to the POM file, or to the directory containing ``pom.xml``.

        Returns
        -------
        Descriptor
            The descriptor of the project.

        Raises
        ------
        DescriptorResolutionError
            If the POM cannot be read or parsed.
        MalformedCoordinateError
            If the coordinate of the project or of its parent is incomplete.
        """
        if os.path.isdir(pom_path):
            pom_path = os.path.join(pom_path, "pom.xml")
        pom_path = os.path.abspath(pom_path)
        descriptor = self._read_file(pom_path, pom_path)
        self._register_parents_on_disk(descriptor)
        return descriptor

    def resolve(self, coordinate: MavenCoordinate) -> Descriptor:
        with self._lock:
            project_pom = self._project_poms.get(coordinate)
        if project_pom:
            logger.debug("Found the POM of %s in the project at %s", coordinate, project_pom)
            return self._read_file(str(coordinate), project_pom)

        pom_path = construct_pom_path(coordinate)
        if self.local_repository:
            local_pom = os.path.abspath(os.path.join(self.local_repository, pom_path))
            if os.path.isfile(local_pom):
                logger.debug("Found the POM of %s in the local repository at %s", coordinate, local_pom)
                return self._read_file(str(coordinate), local_pom)

        failures = []
        for repository in self.remote_repositories:
            url = f"{repository.rstrip('/')}/{pom_path}"
            response = send_get_http_raw(url, cancellation=self.cancellation)
            if response is None:
                failures.append(f"{url}: no response")
                continue
            if response.status_code != 200:
                failures.append(f"{url}: HTTP {response.status_code}")
                continue

            logger.debug("Found the POM of %s at %s", coordinate, url)
            return self._read(str(coordinate), response.content, url)

        if not failures:
            raise DescriptorResolutionError(str(coordinate), "the POM is not in the local repository")
        raise DescriptorResolutionError(str(coordinate), "; ".join(failures))

    def _register_parents_on_disk(self, descriptor: Descriptor) -> None:
        """Register the parent POMs reachable through ``<relativePath>`` from the POM of ``descriptor``."""
        seen = {descriptor.location}
        current = descriptor
        while current.parent is not None and current.parent_relative_path is not None:
            candidate = os.path.normpath(
                os.path.join(os.path.dirname(current.location), current.parent_relative_path)
            )
            if os.path.isdir(candidate):
                candidate = os.path.join(candidate, "pom.xml")
            if candidate in seen or not os.path.isfile(candidate):
                return
            seen.add(candidate)

            try:
                with open(candidate, "rb") as file:
                    parent = read_descriptor(file.read(), candidate)
            except (OSError, ParseError, MalformedCoordinateError) as error:
                logger.debug("Ignoring the parent POM at %s: %s", candidate, error)
                return

            if parent.coordinate != current.parent:
                logger.debug(
                    "The POM at %s is %s, not the parent %s. Ignore ...", candidate, parent.coordinate, current.parent
                )
                return

            with self._lock:
                self._project_poms.setdefault(parent.coordinate, candidate)
            current = parent

    def _read_file(self, coordinate: str, path: str) -> Descriptor:
        try:
            with open(path, "rb") as file:
                content = file.read()
        except OSError as error:
            raise DescriptorResolutionError(coordinate, str(error)) from error
        return self._read(coordinate, content, path)

    @staticmethod
    def _read(coordinate: str, content: bytes, location: str) -> Descriptor:
        try:
            return read_descriptor(content, location)
        except ParseError as error:
            raise DescriptorResolutionError(coordinate, str(error)) from error
