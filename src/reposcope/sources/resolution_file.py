# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the dependency graph source backed by a JSON resolution file.

The file has the following format::

    {
        "artifacts": ["org.example:foo:1.0", ...],
        "repositories": [{"id": "central", "url": "https://repo.maven.apache.org/maven2", "name": "..."}, ...]
    }
"""

import json
import logging

from reposcope.artifact.maven import MavenCoordinate
from reposcope.errors import GraphResolutionError
from reposcope.provenance.repository import RepositoryDeclaration
from reposcope.sources.base import DependencyGraph, DependencyGraphSource, Descriptor

logger: logging.Logger = logging.getLogger(__name__)


class ResolutionFileGraphSource(DependencyGraphSource):
    """Read the dependency graph from a resolution file computed beforehand."""

    def __init__(self, path: str) -> None:
        self.path = path

    def resolve(self, project: Descriptor) -> DependencyGraph:
        try:
            with open(self.path, encoding="utf-8") as file:
                content = json.load(file)
        except OSError as error:
            raise GraphResolutionError(f"cannot read the resolution file {self.path}: {error}") from error
        except json.JSONDecodeError as error:
            raise GraphResolutionError(f"the resolution file {self.path} is not valid JSON: {error}") from error

        if not isinstance(content, dict):
            raise GraphResolutionError(f"the resolution file {self.path} must contain a JSON object")

        artifacts = content.get("artifacts", [])
        repositories = content.get("repositories", [])
        if not isinstance(artifacts, list) or not all(isinstance(item, str) for item in artifacts):
            raise GraphResolutionError(f"'artifacts' in {self.path} must be a list of 'groupId:artifactId:version'")
        if not isinstance(repositories, list) or not all(isinstance(item, dict) for item in repositories):
            raise GraphResolutionError(f"'repositories' in {self.path} must be a list of objects")

        coordinates: dict[MavenCoordinate, None] = {}
        for artifact in artifacts:
            coordinates[MavenCoordinate.from_string(artifact)] = None

        declarations = []
        for repository in repositories:
            repo_id = repository.get("id")
            url = repository.get("url")
            if not isinstance(repo_id, str) or not isinstance(url, str) or not repo_id or not url:
                raise GraphResolutionError(f"every repository in {self.path} must have a non-empty 'id' and 'url'")
            declarations.append(
                RepositoryDeclaration.create(
                    repo_id,
                    url,
                    name=repository.get("name"),
                    layout=repository.get("layout"),
                )
            )

        logger.debug(
            "Read %d artifact(s) and %d repositories from %s for %s.",
            len(coordinates),
            len(declarations),
            self.path,
            project.coordinate,
        )
        return DependencyGraph(tuple(coordinates), tuple(declarations))
