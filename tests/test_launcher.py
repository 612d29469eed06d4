import subprocess
from pathlib import Path

import pytest

from nbclassifier.launcher import launcher as launcher_module
from nbclassifier.launcher import config as config_module
from nbclassifier.launcher.config import default_home, load_settings
from nbclassifier.launcher.launcher import (
    SparkVersionError,
    compare_versions,
    detect_spark_version,
    main,
    version_key,
    version_less_than,
)


# ---------------------------------------------------------------------------
# Version comparison
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("1.2.0", "1.10.0", True),
        ("1.2.0", "1.2.0", False),
        ("2.0", "1.2.0", False),
        ("1.2.0", "2.0", True),
        ("1.2", "1.2.0", False),
        ("1.3.0-SNAPSHOT", "1.3.0", False),
        ("0.9.9", "1.0", True),
    ],
)
def test_version_less_than(a, b, expected):
    assert version_less_than(a, b) is expected


def test_compare_versions():
    assert compare_versions("2.0", "1.2.0") == 1
    assert compare_versions("1.2", "1.2.0") == 0
    assert compare_versions("1.2.0", "1.10.0") == -1


def test_version_key():
    assert version_key("1.6.0-SNAPSHOT") == (1, 6, 0)
    assert version_key("3.x") == (3, 0)
    with pytest.raises(ValueError):
        version_key("  ")


# ---------------------------------------------------------------------------
# Spark detection
# ---------------------------------------------------------------------------

def test_detect_spark_version_from_release(tmp_path):
    (tmp_path / "RELEASE").write_text("Spark 1.3.1 built for Hadoop 2.4.0\n")

    assert detect_spark_version(tmp_path) == "1.3.1"


def test_detect_spark_version_from_assembly_jar(tmp_path):
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "spark-assembly-1.4.0-hadoop2.6.0.jar").touch()

    assert detect_spark_version(tmp_path) == "1.4.0"


def test_detect_spark_version_from_core_jar(tmp_path):
    (tmp_path / "jars").mkdir()
    (tmp_path / "jars" / "spark-core_2.12-3.5.1.jar").touch()

    assert detect_spark_version(tmp_path) == "3.5.1"


def test_detect_spark_version_unknown(tmp_path):
    with pytest.raises(SparkVersionError):
        detect_spark_version(tmp_path)


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------

@pytest.fixture
def install(tmp_path, monkeypatch) -> dict[str, Path]:
    """A fake installation: home with classpath helper, Java and Spark."""
    home = tmp_path / "home"
    (home / "bin").mkdir(parents=True)
    (home / "bin" / "compute-classpath.sh").write_text("#!/bin/sh\n")

    java_home = tmp_path / "java"
    (java_home / "bin").mkdir(parents=True)
    (java_home / "bin" / "java").touch()

    spark_home = tmp_path / "spark"
    spark_home.mkdir()
    (spark_home / "RELEASE").write_text("Spark 1.3.1 built for Hadoop 2.4.0\n")

    monkeypatch.setenv("NBCLASSIFIER_HOME", str(home))
    monkeypatch.setenv("JAVA_HOME", str(java_home))
    monkeypatch.setenv("SPARK_HOME", str(spark_home))
    monkeypatch.setenv("JAVA_OPTS", "-Xmx1g")
    return {"home": home, "java_home": java_home, "spark_home": spark_home}


@pytest.fixture
def exec_calls(monkeypatch) -> list[tuple]:
    calls: list[tuple] = []
    monkeypatch.setattr(
        launcher_module.os, "execve", lambda path, argv, env: calls.append((path, argv, env))
    )
    return calls


def _fake_run(returncode: int, stdout: str = "", stderr: str = ""):
    def run(args, **kwargs):
        return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)
    return run


@pytest.mark.parametrize("argv", [[], ["-x"], ["--help", "org.example.Main"]])
def test_missing_class_prints_usage(argv, capsys, exec_calls):
    assert main(argv) == 1

    assert "Usage: nbclassifier-class <class>" in capsys.readouterr().err
    assert exec_calls == []



def test_missing_runtime(install, monkeypatch, capsys, exec_calls):
    monkeypatch.delenv("JAVA_HOME")
    monkeypatch.setattr(launcher_module.shutil, "which", lambda name: None)

    assert main(["org.example.Main"]) == 1

    assert "JAVA_HOME is not set" in capsys.readouterr().err
    assert exec_calls == []


def test_java_home_without_binary(install, monkeypatch, capsys, exec_calls, tmp_path):
    monkeypatch.setenv("JAVA_HOME", str(tmp_path / "no-java"))

    assert main(["org.example.Main"]) == 1
    assert "No Java runtime" in capsys.readouterr().err
    assert exec_calls == []


def test_old_spark_is_rejected(install, capsys, exec_calls):
    (install["spark_home"] / "RELEASE").write_text("Spark 1.2.0 built for Hadoop 2.4.0\n")

    assert main(["org.example.Main"]) == 1

    err = capsys.readouterr().err
    assert "Spark 1.2.0" in err
    assert "1.3.0 or later" in err
    assert exec_calls == []


def test_classpath_failure_is_forwarded(install, monkeypatch, capsys, exec_calls):
    monkeypatch.setattr(
        launcher_module.subprocess, "run", _fake_run(1, stderr="No jars found under lib")
    )

    assert main(["org.example.Main"]) == 1

    assert "No jars found under lib" in capsys.readouterr().err
    assert exec_calls == []


def test_missing_classpath_helper(install, capsys, exec_calls):
    (install["home"] / "bin" / "compute-classpath.sh").unlink()

    assert main(["org.example.Main"]) == 1
    assert "Classpath helper not found" in capsys.readouterr().err
    assert exec_calls == []


def test_execs_runtime_with_classpath_and_args(install, monkeypatch, exec_calls):
    monkeypatch.setattr(
        launcher_module.subprocess, "run", _fake_run(0, stdout="/a.jar:/b.jar\n")
    )

    assert main(["org.example.Main", "--engine-id", "x", "-v"]) == 0

    assert len(exec_calls) == 1
    path, argv, env = exec_calls[0]
    java = str(install["java_home"] / "bin" / "java")
    assert path == java
    assert argv == [
        java, "-cp", "/a.jar:/b.jar", "-Xmx1g",
        "org.example.Main", "--engine-id", "x", "-v",
    ]
    assert env["NBCLASSIFIER_HOME"] == str(install["home"])
    assert env["SPARK_HOME"] == str(install["spark_home"])


def test_runtime_found_on_path(install, monkeypatch, exec_calls):
    monkeypatch.delenv("JAVA_HOME")
    monkeypatch.setattr(launcher_module.shutil, "which", lambda name: "/usr/bin/java")
    monkeypatch.setattr(launcher_module.subprocess, "run", _fake_run(0, stdout="/a.jar"))

    assert main(["org.example.Main"]) == 0
    assert exec_calls[0][0] == "/usr/bin/java"


def test_settings_read_env_file(tmp_path, monkeypatch):
    monkeypatch.delenv("JAVA_OPTS", raising=False)
    monkeypatch.delenv("NBCLASSIFIER_HOME", raising=False)
    (tmp_path / "conf").mkdir()
    (tmp_path / "conf" / "nbclassifier-env.sh").write_text('export JAVA_OPTS="-Xmx2g"\n')

    settings = load_settings(tmp_path)

    assert settings.home == tmp_path
    assert settings.java_opts == "-Xmx2g"


def test_settings_default_spark_home(tmp_path, monkeypatch):
    monkeypatch.delenv("SPARK_HOME", raising=False)

    settings = load_settings(tmp_path)

    assert settings.resolved_spark_home == tmp_path / "vendors" / "spark"


TEMPLATE = Path(__file__).resolve().parents[1] / "conf" / "nbclassifier-env.sh.template"


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("NBCLASSIFIER_HOME", "SPARK_HOME", "JAVA_HOME", "JAVA_OPTS"):
        monkeypatch.delenv(name, raising=False)


def _env_file(home: Path, text: str) -> None:
    (home / "conf").mkdir(parents=True, exist_ok=True)
    (home / "conf" / "nbclassifier-env.sh").write_text(text)


def test_shipped_template_keeps_default_spark_home(tmp_path, clean_env):
    _env_file(tmp_path, TEMPLATE.read_text())

    settings = load_settings(tmp_path)

    assert settings.resolved_spark_home == tmp_path / "vendors" / "spark"
    assert settings.java_home is None
    assert settings.java_opts == ""


def test_env_file_expands_home_variable(tmp_path, clean_env):
    _env_file(tmp_path, "export SPARK_HOME=$NBCLASSIFIER_HOME/vendors/spark-3\n")

    settings = load_settings(tmp_path)

    assert settings.resolved_spark_home == tmp_path / "vendors" / "spark-3"


def test_env_file_relative_paths_use_home(tmp_path, clean_env):
    _env_file(tmp_path, "SPARK_HOME=vendors/spark\nJAVA_HOME=jdk\n")

    settings = load_settings(tmp_path)

    assert settings.resolved_spark_home == tmp_path / "vendors" / "spark"
    assert settings.java_home == tmp_path / "jdk"


def test_default_home_prefers_variable(tmp_path, monkeypatch):
    monkeypatch.setenv("NBCLASSIFIER_HOME", str(tmp_path))

    assert default_home() == tmp_path


def test_default_home_is_source_tree(clean_env):
    assert default_home() == Path(__file__).resolve().parents[1]


def test_default_home_falls_back_to_cwd(tmp_path, clean_env, monkeypatch):
    site = tmp_path / "site-packages" / "nbclassifier" / "launcher"
    site.mkdir(parents=True)
    monkeypatch.setattr(config_module, "__file__", str(site / "config.py"))
    monkeypatch.chdir(tmp_path)

    assert default_home() == tmp_path
