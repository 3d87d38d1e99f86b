# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains error classes for reposcope."""


class ReposcopeError(Exception):
    """The base class for reposcope errors."""


class ConfigurationError(ReposcopeError):
    """Happens when there is an error in the configuration (.ini) file or in a Maven settings file."""


class ParseError(ReposcopeError):
    """The errors related to parsers."""


class MalformedCoordinateError(ReposcopeError):
    """Happens when an artifact or parent coordinate does not parse into group, artifact and version."""

    def __init__(self, coordinate: str, reason: str = "") -> None:
        self.coordinate = coordinate
        message = f"Malformed coordinate '{coordinate}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DescriptorResolutionError(ReposcopeError):
    """Happens when the build descriptor of a coordinate cannot be fetched or parsed."""

    def __init__(self, coordinate: str, cause: str) -> None:
        self.coordinate = coordinate
        self.cause = cause
        super().__init__(f"Unable to resolve the POM for {coordinate}: {cause}")


class CyclicAncestryError(ReposcopeError):
    """Happens when a parent chain revisits a coordinate."""

    def __init__(self, coordinate: str, chain: list[str] | None = None) -> None:
        self.coordinate = coordinate
        self.chain = chain or []
        message = f"Cyclic parent chain detected at {coordinate}"
        if self.chain:
            message = f"{message} ({' -> '.join([*self.chain, coordinate])})"
        super().__init__(message)


class GraphResolutionError(ReposcopeError):
    """Happens when the dependency graph of the project cannot be resolved."""

    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(f"Unable to resolve the dependency graph: {cause}")


class AnalysisCancelledError(ReposcopeError):
    """Happens when the analysis is aborted by a cancellation signal or a timeout."""
