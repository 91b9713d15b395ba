import json

import pytest
from typer.testing import CliRunner

from jvm_provenance.cli import CLIConfig
from jvm_provenance.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def machine_mode():
    CLIConfig.set_machine_mode(None)
    yield
    CLIConfig.set_machine_mode(None)


@pytest.fixture
def options_file(tmp_path, widgets_artifact):
    path = tmp_path / "options.json"
    path.write_text(json.dumps({
        "packages": [{
            "group": "com.acme",
            "artifact": "widgets",
            "version": "1.0",
            "path": str(widgets_artifact.path),
        }],
        "index_jdk": False,
        "java_version": "17",
    }))
    return path


def test_resolve_json(options_file):
    result = runner.invoke(app, ["resolve", "com/acme/Widget#run().", "local2", "--options", str(options_file)])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload[0] == {
        "symbol": "com/acme/Widget#run().",
        "classfile": "com/acme/Widget.class",
        "package": {"kind": "artifact", "group": "com.acme", "artifact": "widgets", "version": "1.0"},
    }
    assert payload[1] == {"symbol": "local2", "classfile": None, "package": None}


def test_classfile_json(options_file):
    result = runner.invoke(app, ["classfile", "com/acme/Gadget.class", "java/lang/String.class",
                                 "--options", str(options_file)])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload[0]["package"]["artifact"] == "widgets"
    assert payload[1]["package"] is None


def test_resolve_with_dependencies_file(tmp_path, widgets_artifact, monkeypatch):
    monkeypatch.setenv("JVM_PROVENANCE_JAVA_VERSION", "11")
    monkeypatch.setenv("JVM_PROVENANCE_INDEX_JDK", "false")
    deps = tmp_path / "dependencies.txt"
    deps.write_text(f"com.acme\twidgets\t1.0\t{widgets_artifact.path}\n")

    result = runner.invoke(app, ["resolve", "com/acme/Gadget#", "--dependencies", str(deps)])
    assert result.exit_code == 0
    assert json.loads(result.stdout)[0]["package"]["version"] == "1.0"


def test_stats_json(options_file):
    result = runner.invoke(app, ["stats", "--options", str(options_file)])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["total_classfiles"] == 2
    assert payload["runtime_version"] == "17"


def test_runtime_json():
    result = runner.invoke(app, ["runtime", "--java-version", "1.8.0_292"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "version": "1.8.0_292",
        "major": 8,
        "legacy": True,
        "package": {"kind": "runtime", "version": "8"},
    }


def test_emit_writes_lsif(tmp_path, options_file):
    imports = tmp_path / "imports.tsv"
    imports.write_text("5\tcom/acme/Widget#\n6\tlocal2\n7\tcom/acme/Gadget#size.\nbogus line\n")

    result = runner.invoke(app, ["emit", str(imports), "--options", str(options_file), "--start-id", "1000"])
    assert result.exit_code == 0
    elements = [json.loads(line) for line in result.stdout.splitlines()]
    assert elements == [
        {"id": 1000, "type": "vertex", "label": "packageInformation",
         "name": "com.acme:widgets", "manager": "jvm-dependencies", "version": "1.0"},
        {"id": 1001, "type": "edge", "label": "packageInformation", "outV": 5, "inV": 1000},
        {"id": 1002, "type": "edge", "label": "packageInformation", "outV": 7, "inV": 1000},
    ]


def test_bad_options_exit_with_error(tmp_path):
    missing = tmp_path / "missing.json"
    result = runner.invoke(app, ["resolve", "com/acme/Widget#", "--options", str(missing)])
    assert result.exit_code == 1


def test_human_mode_table(options_file):
    result = runner.invoke(app, ["--human", "resolve", "com/acme/Widget#", "--options", str(options_file)])
    assert result.exit_code == 0
    assert "com.acme:widgets:1.0" in result.stdout


def test_human_classfile_table_resolves_each_key_once(options_file, monkeypatch):
    from jvm_provenance.resolution import PackageTable

    calls = []
    original = PackageTable.resolve_package

    def counting_resolve(self, key):
        calls.append(key)
        return original(self, key)

    monkeypatch.setattr(PackageTable, "resolve_package", counting_resolve)
    result = runner.invoke(app, ["--human", "classfile", "com/acme/Widget.class", "java/lang/String.class",
                                 "--options", str(options_file)])
    assert result.exit_code == 0
    assert "com.acme:widgets:1.0" in result.stdout
    assert calls == ["com/acme/Widget.class", "java/lang/String.class"]
