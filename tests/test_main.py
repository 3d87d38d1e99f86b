# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Simple tests for the main method."""

import json
import os
import re
from importlib import metadata as importlib_metadata
from pathlib import Path

import pytest
from pytest_httpserver import HTTPServer

from reposcope.__main__ import main
from reposcope.provenance.registry import SETTINGS_LOCATION

# We need to pass fixture names as arguments to maintain an order.
# pylint: disable=redefined-outer-name

PROJECT_POM = """
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <parent>
        <groupId>org.example</groupId>
        <artifactId>corp-parent</artifactId>
        <version>3</version>
    </parent>
    <artifactId>app</artifactId>
    <version>1.0</version>
    <repositories>
        <repository>
            <id>corp-releases</id>
            <url>https://repo.corp/maven/releases</url>
        </repository>
    </repositories>
</project>
"""

PARENT_POM = """
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <groupId>org.example</groupId>
    <artifactId>corp-parent</artifactId>
    <version>3</version>
    <packaging>pom</packaging>
    <repositories>
        <repository>
            <id>corp-snapshots</id>
            <url>https://repo.corp/maven/snapshots</url>
        </repository>
    </repositories>
</project>
"""

LIB_POM = """
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <groupId>org.example</groupId>
    <artifactId>lib</artifactId>
    <version>2.0</version>
    <repositories>
        <repository>
            <id>lib-repo</id>
            <url>https://lib.example/maven</url>
        </repository>
    </repositories>
</project>
"""

SETTINGS = """
<settings xmlns="http://maven.apache.org/SETTINGS/1.0.0">
    <mirrors>
        <mirror>
            <id>corp-mirror</id>
            <url>https://mirror.corp/maven</url>
            <mirrorOf>external:*</mirrorOf>
        </mirror>
    </mirrors>
</settings>
"""


def _write(path: Path, content: str) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return str(path)


@pytest.fixture()
def workspace(tmp_path: Path, httpserver: HTTPServer) -> dict[str, str]:
    """Create a project, a local Maven repository, a settings file and a resolution file.

    The remote repository is a local server that does not have any POM.
    """
    httpserver.expect_request(re.compile("^/maven2/")).respond_with_data("Not Found", status=404)
    return {
        "output": str(tmp_path.joinpath("output")),
        "project": _write(tmp_path.joinpath("project", "pom.xml"), PROJECT_POM),
        "parent": _write(
            tmp_path.joinpath("m2", "org", "example", "corp-parent", "3", "corp-parent-3.pom"), PARENT_POM
        ),
        "lib": _write(tmp_path.joinpath("m2", "org", "example", "lib", "2.0", "lib-2.0.pom"), LIB_POM),
        "m2": str(tmp_path.joinpath("m2")),
        "settings": _write(tmp_path.joinpath("settings.xml"), SETTINGS),
        "resolution": _write(
            tmp_path.joinpath("resolution.json"),
            json.dumps(
                {
                    "artifacts": ["org.example:lib:2.0"],
                    "repositories": [
                        {"id": "corp-releases", "url": "https://repo.corp/maven/releases"},
                        {"id": "central", "url": "https://repo.maven.apache.org/maven2"},
                        {"id": "corp-mirror", "url": "https://mirror.corp/maven"},
                    ],
                }
            ),
        ),
        "defaults": _write(
            tmp_path.joinpath("defaults.ini"),
            "[requests]\n"
            "error_retries = 0\n"
            "retry_delay = 0\n"
            "[maven]\n"
            f"remote_repositories = {httpserver.url_for('/maven2')}\n",
        ),
    }


def _analyze(workspace: dict[str, str], *args: str) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(
            [
                "-o",
                workspace["output"],
                "-dp",
                workspace["defaults"],
                "analyze",
                "--local-maven-repo",
                workspace["m2"],
                "--settings",
                workspace["settings"],
                *args,
            ]
        )
    return int(exc_info.value.code or 0)


@pytest.mark.parametrize(
    ("flag"),
    [
        "--version",
        "-V",
    ],
)
def test_version(capsys: pytest.CaptureFixture, flag: str) -> None:
    """Test the ``--version/-V`` flag.

    Stdout format should be correct and exit code should be 0.
    """
    with pytest.raises(SystemExit) as exc_info:
        main([flag])
    out, err = capsys.readouterr()

    # Test that we are indeed outputting reposcope version.
    assert out == f"reposcope {importlib_metadata.version('reposcope')}\n"
    assert err == ""
    assert exc_info.value.code == 0


def test_no_action() -> None:
    """Test that running without an action prints the help and fails."""
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == os.EX_USAGE


def test_dump_defaults(tmp_path: Path) -> None:
    """Test dumping the defaults.ini file to the output directory."""
    output_dir = tmp_path.joinpath("output")
    with pytest.raises(SystemExit) as exc_info:
        main(["-o", str(output_dir), "dump-defaults"])
    assert exc_info.value.code == os.EX_OK
    assert output_dir.joinpath("defaults.ini").is_file()


def test_analyze(workspace: dict[str, str]) -> None:
    """Test analyzing a project on disk with a resolution file."""
    exit_code = _analyze(
        workspace, "-f", os.path.dirname(workspace["project"]), "--resolution-file", workspace["resolution"]
    )
    assert exit_code == os.EX_OK

    with open(os.path.join(workspace["output"], "repositories.json"), encoding="utf-8") as file:
        report = json.load(file)

    assert report["project"] == "org.example:app:1.0"
    assert report["artifacts"] == 1
    assert [(entry["id"], entry["locations"]) for entry in report["repositories"]] == [
        ("corp-releases", [workspace["project"]]),
        ("central", []),
        ("corp-mirror", [SETTINGS_LOCATION]),
    ]
    assert "declared_repositories" not in report
    assert os.path.isfile(os.path.join(workspace["output"], "repositories.html"))
    assert os.path.isfile(os.path.join(workspace["output"], "debug.log"))


@pytest.mark.parametrize("workers", ["1", "4"])
def test_analyze_show_declared(workspace: dict[str, str], workers: str) -> None:
    """Test listing every declared repository, used or not."""
    exit_code = _analyze(
        workspace,
        "-f",
        workspace["project"],
        "--resolution-file",
        workspace["resolution"],
        "--show-declared",
        "--workers",
        workers,
    )
    assert exit_code == os.EX_OK

    with open(os.path.join(workspace["output"], "repositories.json"), encoding="utf-8") as file:
        report = json.load(file)

    declared = {entry["id"]: entry for entry in report["declared_repositories"]}
    assert declared.keys() == {"corp-mirror", "corp-releases", "corp-snapshots", "lib-repo"}
    assert declared["corp-snapshots"]["locations"] == [workspace["parent"]]
    assert declared["corp-snapshots"]["used"] is False
    assert declared["lib-repo"]["locations"] == [workspace["lib"]]
    assert declared["corp-mirror"]["kind"] == "mirror"


def test_analyze_package_url(workspace: dict[str, str]) -> None:
    """Test analyzing a published artifact found in the local repository."""
    exit_code = _analyze(
        workspace, "-purl", "pkg:maven/org.example/lib@2.0", "--resolution-file", workspace["resolution"]
    )
    assert exit_code == os.EX_OK


def test_analyze_package_url_without_resolution_file(workspace: dict[str, str]) -> None:
    """Test that a published artifact cannot be analyzed without a resolution file."""
    assert _analyze(workspace, "-purl", "pkg:maven/org.example/lib@2.0") == os.EX_USAGE


def test_analyze_malformed_package_url(workspace: dict[str, str]) -> None:
    """Test analyzing a PURL that does not identify a Maven artifact version."""
    exit_code = _analyze(workspace, "-purl", "pkg:maven/org.example/lib", "--resolution-file", workspace["resolution"])
    assert exit_code == os.EX_DATAERR


def test_analyze_missing_resolution_file(workspace: dict[str, str], tmp_path: Path) -> None:
    """Test analyzing with a resolution file that does not exist."""
    exit_code = _analyze(
        workspace, "-f", workspace["project"], "--resolution-file", str(tmp_path.joinpath("missing.json"))
    )
    assert exit_code == os.EX_OSFILE


def test_analyze_missing_parent(workspace: dict[str, str]) -> None:
    """Test that a parent POM found in no repository fails the analysis."""
    os.remove(workspace["parent"])
    exit_code = _analyze(workspace, "-f", workspace["project"], "--resolution-file", workspace["resolution"])
    assert exit_code == os.EX_UNAVAILABLE


def test_analyze_cyclic_parents(workspace: dict[str, str]) -> None:
    """Test that a parent chain revisiting a POM fails the analysis."""
    _write(
        Path(workspace["parent"]),
        PARENT_POM.replace(
            "<packaging>pom</packaging>",
            "<parent><groupId>org.example</groupId><artifactId>corp-parent</artifactId><version>3</version></parent>",
        ),
    )
    exit_code = _analyze(workspace, "-f", workspace["project"], "--resolution-file", workspace["resolution"])
    assert exit_code == os.EX_DATAERR


def test_analyze_invalid_local_maven_repo(workspace: dict[str, str], tmp_path: Path) -> None:
    """Test analyzing with a local Maven repository that does not exist."""
    workspace["m2"] = str(tmp_path.joinpath("missing"))
    exit_code = _analyze(workspace, "-f", workspace["project"], "--resolution-file", workspace["resolution"])
    assert exit_code == os.EX_USAGE
