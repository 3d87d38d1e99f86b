# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the types describing declared remote repositories."""

from dataclasses import dataclass, field
from enum import Enum


class RepositoryKind(str, Enum):
    """The kind of declaration a repository comes from."""

    REGULAR = "regular"
    PLUGIN = "plugin"
    MIRROR = "mirror"


@dataclass(frozen=True)
class RepositoryIdentity:
    """The logical identity of a repository.

    Two declarations denote the same repository if and only if both the id and the url are equal.
    The comparison is case-sensitive and the url is not normalized.
    """

    #: The repository id.
    id: str  # pylint: disable=invalid-name

    #: The repository url.
    url: str

    def __str__(self) -> str:
        return f"{self.id} ({self.url})"


@dataclass(frozen=True)
class RepositoryDeclaration:
    """A repository declared in a POM, in a Maven settings file or returned by the dependency resolution.

    Only ``identity`` takes part in equality. The other fields are descriptive metadata.
    """

    identity: RepositoryIdentity
    name: str | None = field(default=None, compare=False)
    layout: str | None = field(default=None, compare=False)
    releases_enabled: bool | None = field(default=None, compare=False)
    snapshots_enabled: bool | None = field(default=None, compare=False)
    release_update_policy: str | None = field(default=None, compare=False)
    snapshot_update_policy: str | None = field(default=None, compare=False)
    kind: RepositoryKind = field(default=RepositoryKind.REGULAR, compare=False)

    #: The ``<mirrorOf>`` pattern of a mirror declaration.
    mirror_of: str | None = field(default=None, compare=False)

    @classmethod
    def create(cls, repo_id: str, url: str, **metadata: object) -> "RepositoryDeclaration":
        """Create a declaration from its id, its url and optional metadata fields."""
        return cls(RepositoryIdentity(repo_id, url), **metadata)  # type: ignore[arg-type]

    @property
    def id(self) -> str:  # pylint: disable=invalid-name
        """Return the repository id."""
        return self.identity.id

    @property
    def url(self) -> str:
        """Return the repository url."""
        return self.identity.url

    def get_dict(self) -> dict:
        """Return the dictionary representation of the declaration."""
        result: dict = {
            "id": self.id,
            "url": self.url,
            "name": self.name,
            "layout": self.layout,
            "kind": self.kind.value,
            "releases": {"enabled": self.releases_enabled, "update_policy": self.release_update_policy},
            "snapshots": {"enabled": self.snapshots_enabled, "update_policy": self.snapshot_update_policy},
        }
        if self.mirror_of is not None:
            result["mirror_of"] = self.mirror_of
        return result
