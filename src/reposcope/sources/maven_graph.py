# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the dependency graph source that runs the Maven dependency plugin on the project."""

import logging
import os
import re
import subprocess  # nosec B404
import tempfile

from reposcope.artifact.maven import MavenCoordinate
from reposcope.config.defaults import defaults
from reposcope.config.global_config import global_config
from reposcope.errors import GraphResolutionError
from reposcope.provenance.repository import RepositoryDeclaration
from reposcope.sources.base import DependencyGraph, DependencyGraphSource, Descriptor

logger: logging.Logger = logging.getLogger(__name__)

#: The ``* id (url, layout, ...)`` lines printed by recent versions of ``dependency:list-repositories``.
REPOSITORY_LINE_PATTERN = re.compile(r"^\*\s+(?P<id>\S+)\s+\((?P<url>[^,\s)]+)")

LOG_PREFIX_PATTERN = re.compile(r"^\[(INFO|WARNING|WARN|ERROR|DEBUG)\]\s?")


def parse_dependency_list(content: str) -> list[MavenCoordinate]:
    """Parse the output file of ``dependency:list``.

    Each artifact line has the format ``groupId:artifactId:type[:classifier]:version[:scope]``, optionally
    followed by the module information. Other lines are ignored.

    Parameters
    ----------
    content : str
        The content of the output file.

    Returns
    -------
    list[MavenCoordinate]
        The artifacts, each listed once, in the order they first appear.

    Examples
    --------
    >>> parse_dependency_list("   junit:junit:jar:4.13.2:test")
    [MavenCoordinate(group_id='junit', artifact_id='junit', version='4.13.2')]
    """
    artifacts: dict[MavenCoordinate, None] = {}
    for line in content.splitlines():
        line = LOG_PREFIX_PATTERN.sub("", line.strip())
        if not line:
            continue
        parts = line.split()[0].split(":")
        if len(parts) < 4 or not all(parts):
            continue

        match len(parts):
            case 4 | 5:
                version = parts[3]
            case _:
                version = parts[4]
        artifacts[MavenCoordinate(parts[0], parts[1], version)] = None
    return list(artifacts)


def parse_repository_list(content: str) -> list[RepositoryDeclaration]:
    """Parse the output of ``dependency:list-repositories``.

    Both the ``id:``/``url:`` blocks of older plugin versions and the ``* id (url, ...)`` lines of recent
    versions are supported.

    Parameters
    ----------
    content : str
        The console output of Maven.

    Returns
    -------
    list[RepositoryDeclaration]
        The repositories, each listed once, in the order they first appear.
    """
    repositories: dict[RepositoryDeclaration, None] = {}
    pending_id: str | None = None
    for line in content.splitlines():
        line = LOG_PREFIX_PATTERN.sub("", line.strip()).strip()

        if match := REPOSITORY_LINE_PATTERN.match(line):
            repositories.setdefault(RepositoryDeclaration.create(match.group("id"), match.group("url")), None)
            pending_id = None
            continue

        key, _, value = line.partition(":")
        value = value.strip()
        match key.strip():
            case "id" if value:
                pending_id = value
            case "url" if value and pending_id:
                repositories.setdefault(RepositoryDeclaration.create(pending_id, value), None)
                pending_id = None
    return list(repositories)


class MavenGraphSource(DependencyGraphSource):
    """Resolve the dependency graph of a project on disk with the Maven dependency plugin."""

    def __init__(self, mvn_command: str | None = None, timeout: int | None = None, include_parents: bool = True):
        """Initialize the source.

        Parameters
        ----------
        mvn_command : str | None
            The Maven executable. Defaults to ``[maven] mvn_command``.
        timeout : int | None
            The timeout in seconds of each Maven invocation. Defaults to ``[maven] timeout``.
        include_parents : bool
            Whether the parent POMs of the dependencies are listed as artifacts.
        """
        self.mvn_command = mvn_command or defaults.get("maven", "mvn_command", fallback="mvn")
        self.timeout = timeout or defaults.getint("maven", "timeout", fallback=1200)
        self.include_parents = include_parents

    def resolve(self, project: Descriptor) -> DependencyGraph:
        if not os.path.isfile(project.location):
            raise GraphResolutionError(
                f"running Maven requires the POM of {project.coordinate} on disk, not {project.location}"
            )

        with tempfile.TemporaryDirectory() as output_dir:
            output_file = os.path.join(output_dir, "dependencies.txt")
            self._run(
                project.location,
                [
                    "dependency:list",
                    f"-DoutputFile={output_file}",
                    "-DappendOutput=true",
                    f"-DincludeParents={str(self.include_parents).lower()}",
                ],
            )
            try:
                with open(output_file, encoding="utf-8") as file:
                    artifacts = parse_dependency_list(file.read())
            except FileNotFoundError:
                # The project has no dependency.
                artifacts = []

        output = self._run(project.location, ["dependency:list-repositories"])
        repositories = parse_repository_list(output)
        if not repositories:
            raise GraphResolutionError("Maven did not report any repository used by the build")

        return DependencyGraph(tuple(artifacts), tuple(repositories))

    def _run(self, pom_path: str, goals: list[str]) -> str:
        """Run Maven on the POM and return its console output.

        Raises
        ------
        GraphResolutionError
            If Maven cannot be run, exits with an error or times out.
        """
        command = [self.mvn_command, "-B", "-f", pom_path, *goals]
        logger.info("Running %s", " ".join(command))
        try:
            # Suppressing Bandit's B603 report because the command is built from the configuration.
            result = subprocess.run(  # nosec B603
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=True,
                cwd=os.path.dirname(pom_path),
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as error:
            self._store_log(error.output)
            raise GraphResolutionError(f"{goals[0]} exited with code {error.returncode}") from error
        except subprocess.TimeoutExpired as error:
            self._store_log(error.output)
            raise GraphResolutionError(f"{goals[0]} timed out after {self.timeout} seconds") from error
        except OSError as error:
            raise GraphResolutionError(f"unable to run {self.mvn_command}: {error}") from error

        self._store_log(result.stdout)
        return result.stdout.decode("utf-8", errors="replace")

    @staticmethod
    def _store_log(output: bytes | None) -> None:
        if not output or not global_config.output_path:
            return
        log_path = os.path.join(global_config.output_path, "maven.log")
        with open(log_path, mode="a", encoding="utf-8") as log_file:
            log_file.write(output.decode("utf-8", errors="replace"))
        logger.debug("Stored the Maven log to %s.", log_path)
