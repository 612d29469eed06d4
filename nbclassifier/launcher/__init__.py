"""Launcher for JVM-side engine classes."""

from .config import LauncherSettings, load_settings
from .launcher import (
    MIN_SPARK_VERSION,
    ClasspathError,
    LauncherError,
    RuntimeNotFoundError,
    SparkVersionError,
    check_spark_version,
    compare_versions,
    compute_classpath,
    detect_spark_version,
    launch,
    locate_runtime,
    main,
    version_key,
    version_less_than,
)

__all__ = [
    "LauncherSettings",
    "load_settings",
    "MIN_SPARK_VERSION",
    "ClasspathError",
    "LauncherError",
    "RuntimeNotFoundError",
    "SparkVersionError",
    "check_spark_version",
    "compare_versions",
    "compute_classpath",
    "detect_spark_version",
    "launch",
    "locate_runtime",
    "main",
    "version_key",
    "version_less_than",
]
