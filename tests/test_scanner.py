"""Unit tests for the archive scanner."""

import os
from pathlib import Path, PureWindowsPath

import pytest

from jvm_provenance.exceptions import ArchiveScanError
from jvm_provenance.scanner import (
    build_archive_spec,
    index_declared_artifacts,
    is_jar_candidate,
    normalize_classfile_key,
    scan_archive,
)
from jvm_provenance.schemas import ArtifactPackage, DeclaredArtifact, RuntimePackage

pytestmark = pytest.mark.fast

WIDGETS = ArtifactPackage(group="com.acme", artifact="widgets", version="1.0")


def test_scan_archive_records_only_toplevel_classfiles(widgets_artifact):
    table = {}
    added = scan_archive(widgets_artifact.path, WIDGETS, table)

    assert added == 2
    assert table == {
        "com/acme/Widget.class": WIDGETS,
        "com/acme/Gadget.class": WIDGETS,
    }
    assert "com/acme/Widget$Inner.class" not in table
    assert "META-INF/MANIFEST.MF" not in table


def test_first_archive_keeps_conflicting_classfile(make_jar):
    first = make_jar("first.jar", ["com/acme/Shared.class", "com/acme/A.class"])
    second = make_jar("second.jar", ["com/acme/Shared.class", "com/acme/B.class"])
    other = ArtifactPackage(group="org.other", artifact="shared", version="2.0")

    table = {}
    scan_archive(first, WIDGETS, table)
    added = scan_archive(second, other, table)

    assert added == 1
    assert table["com/acme/Shared.class"] == WIDGETS
    assert table["com/acme/B.class"] == other


def test_corrupt_archive_raises_io_error(tmp_path):
    broken = tmp_path / "broken.jar"
    broken.write_bytes(b"this is not a zip file")

    with pytest.raises(ArchiveScanError) as excinfo:
        scan_archive(broken, WIDGETS, {})

    assert isinstance(excinfo.value, OSError)
    assert excinfo.value.archive_path == str(broken)


def test_is_jar_candidate(tmp_path, make_jar):
    jar = make_jar("lib.jar", ["a/A.class"])
    assert is_jar_candidate(jar)

    directory = tmp_path / "classes.jar"
    directory.mkdir()
    assert not is_jar_candidate(directory)

    not_a_jar = tmp_path / "lib.zip"
    not_a_jar.write_bytes(jar.read_bytes())
    assert not is_jar_candidate(not_a_jar)

    assert not is_jar_candidate(tmp_path / "missing.jar")


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_dangling_symlink_is_not_a_candidate(tmp_path):
    link = tmp_path / "dangling.jar"
    link.symlink_to(tmp_path / "nowhere.jar")
    assert not is_jar_candidate(link)


def test_index_declared_artifacts_skips_non_jars(tmp_path, widgets_artifact):
    classes_dir = tmp_path / "project-classes"
    classes_dir.mkdir()
    artifacts = [
        DeclaredArtifact(group="com.acme", artifact="app", version="0.1", path=classes_dir),
        widgets_artifact,
        DeclaredArtifact(group="com.acme", artifact="docs", version="1.0", path=tmp_path / "docs.pom"),
    ]

    table = {}
    assert index_declared_artifacts(artifacts, table) == 2
    assert set(table.values()) == {widgets_artifact.package}


def test_file_inside_jar_named_directory_is_skipped(tmp_path):
    exploded = tmp_path / "exploded.jar"
    exploded.mkdir()
    readme = exploded / "README.txt"
    readme.write_text("not an archive")
    declared = DeclaredArtifact(group="g", artifact="a", version="1", path=readme)

    assert not is_jar_candidate(readme)
    assert index_declared_artifacts([declared], {}) == 0


def test_missing_declared_jar_is_skipped(tmp_path):
    missing = DeclaredArtifact(group="g", artifact="a", version="1", path=tmp_path / "gone.jar")
    assert index_declared_artifacts([missing], {}) == 0


def test_custom_archive_patterns(make_jar):
    jar = make_jar("runtime.jmod.jar", ["x/X.class"])
    spec = build_archive_spec(["*.zip"])
    assert not is_jar_candidate(jar, spec)


def test_normalize_classfile_key():
    assert normalize_classfile_key("com/acme/Widget.class") == "com/acme/Widget.class"
    assert normalize_classfile_key("com\\acme\\Widget.class") == "com/acme/Widget.class"
    assert normalize_classfile_key("/com/acme/Widget.class") == "com/acme/Widget.class"
    assert normalize_classfile_key(PureWindowsPath("com\\acme\\Widget.class")) == "com/acme/Widget.class"
    assert normalize_classfile_key(Path("com") / "acme" / "Widget.class") == "com/acme/Widget.class"


def test_runtime_package_can_own_archive(make_jar):
    jdk = RuntimePackage(version="8")
    rt = make_jar("rt.jar", ["java/lang/String.class"])
    table = {}
    scan_archive(rt, jdk, table)
    assert table["java/lang/String.class"] == jdk
