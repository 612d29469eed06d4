"""Launcher for JVM-side engine classes.

Resolves the installation home, checks the Spark distribution meets the
minimum version, computes the classpath with the bundled helper script,
and replaces the current process with the Java runtime.

Usage:
    nbclassifier-class <class> [<args>...]
"""

import os
from pathlib import Path
import re
import shlex
import shutil
import subprocess
import sys

from loguru import logger

from nbclassifier.launcher.config import HOME_ENV_VAR, LauncherSettings, load_settings


MIN_SPARK_VERSION = "1.3.0"
USAGE = "Usage: nbclassifier-class <class> [<args>]"

_RELEASE_PATTERN = re.compile(r"Spark\s+v?(\d[\w.\-]*)")
_JAR_PATTERNS = [
    ("lib", re.compile(r"^spark-assembly-(\d+(?:\.\d+)*)")),
    ("jars", re.compile(r"^spark-core_[\d.]+-(\d+(?:\.\d+)*)")),
]


class LauncherError(Exception):
    """Fatal launcher condition; reported on stderr with exit code 1."""


class RuntimeNotFoundError(LauncherError):
    pass


class SparkVersionError(LauncherError):
    pass


class ClasspathError(LauncherError):
    pass


def version_key(version: str) -> tuple[int, ...]:
    """Numeric key for a dotted version string.

    Each component contributes its leading digits; a component without
    digits counts as 0. `"1.6.0-SNAPSHOT"` -> `(1, 6, 0)`.
    """
    version = version.strip()
    if not version:
        raise ValueError("Empty version string")

    key = []
    for component in version.split("."):
        match = re.match(r"\d+", component)
        key.append(int(match.group()) if match else 0)
    return tuple(key)


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as `a` is older, equal or newer than `b`.

    Missing trailing components count as 0, so "2.0" equals "2.0.0".
    """
    ka, kb = version_key(a), version_key(b)
    width = max(len(ka), len(kb))
    ka = ka + (0,) * (width - len(ka))
    kb = kb + (0,) * (width - len(kb))
    return (ka > kb) - (ka < kb)


def version_less_than(a: str, b: str) -> bool:
    return compare_versions(a, b) < 0


def detect_spark_version(spark_home: Path) -> str:
    """Read the Spark version from a distribution directory.

    Checks `RELEASE` first, then assembly / core jar names.

    Raises:
        SparkVersionError: If no version can be found
    """
    release = spark_home / "RELEASE"
    if release.exists():
        match = _RELEASE_PATTERN.search(release.read_text())
        if match:
            return match.group(1)

    for subdir, pattern in _JAR_PATTERNS:
        jar_dir = spark_home / subdir
        if not jar_dir.is_dir():
            continue
        for jar in sorted(jar_dir.glob("*.jar")):
            match = pattern.match(jar.name)
            if match:
                return match.group(1)

    raise SparkVersionError(f"Unable to determine Spark version under {spark_home}")


def check_spark_version(spark_home: Path, minimum: str = MIN_SPARK_VERSION) -> str:
    """Ensure the Spark distribution is at least `minimum`.

    Raises:
        SparkVersionError: If the version is unknown or too old
    """
    version = detect_spark_version(spark_home)
    if version_less_than(version, minimum):
        raise SparkVersionError(
            f"You have Spark {version} at {spark_home}. "
            f"Spark {minimum} or later is required."
        )
    return version


def locate_runtime(java_home: Path | None) -> str:
    """Find the Java binary, preferring JAVA_HOME.

    Raises:
        RuntimeNotFoundError: If no runtime can be found
    """
    if java_home is not None:
        runner = Path(java_home) / "bin" / "java"
        if not runner.exists():
            raise RuntimeNotFoundError(f"No Java runtime at {runner}")
        return str(runner)

    runner = shutil.which("java")
    if runner is None:
        raise RuntimeNotFoundError("JAVA_HOME is not set")
    return runner


def compute_classpath(home: Path, env: dict[str, str] | None = None) -> str:
    """Run `<home>/bin/compute-classpath.sh` and return its output.

    Raises:
        ClasspathError: If the helper is missing or exits non-zero; the
            helper's output is carried in the message
    """
    script = home / "bin" / "compute-classpath.sh"
    if not script.exists():
        raise ClasspathError(f"Classpath helper not found: {script}")

    result = subprocess.run(
        [str(script)],
        capture_output=True,
        text=True,
        env=env,
    )
    if result.returncode != 0:
        output = "\n".join(s for s in (result.stdout.strip(), result.stderr.strip()) if s)
        raise ClasspathError(output or f"{script} exited with status {result.returncode}")

    return result.stdout.strip()


def build_command(
    runner: str,
    classpath: str,
    java_opts: str,
    class_name: str,
    args: list[str],
) -> list[str]:
    return [runner, "-cp", classpath, *shlex.split(java_opts), class_name, *args]


def launch(class_name: str, args: list[str], settings: LauncherSettings) -> None:
    """Resolve everything needed and exec the Java runtime.

    Does not return on success.

    Raises:
        LauncherError: On any fatal condition, before anything is exec'd
    """
    env = dict(os.environ)
    env[HOME_ENV_VAR] = str(settings.home)

    runner = locate_runtime(settings.java_home)

    spark_home = settings.resolved_spark_home
    spark_version = check_spark_version(spark_home)
    env["SPARK_HOME"] = str(spark_home)
    logger.debug("Using Spark {} at {}", spark_version, spark_home)

    classpath = compute_classpath(settings.home, env)

    command = build_command(runner, classpath, settings.java_opts, class_name, args)
    logger.debug("Exec: {}", command)
    os.execve(runner, command, env)


def main(argv: list[str] | None = None) -> int:
    """Launcher entry point."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0].startswith("-"):
        print(USAGE, file=sys.stderr)
        return 1

    class_name, args = argv[0], argv[1:]

    try:
        settings = load_settings()
        launch(class_name, args, settings)
    except LauncherError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
