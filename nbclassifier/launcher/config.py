import os
from pathlib import Path
from string import Template

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


HOME_ENV_VAR = "NBCLASSIFIER_HOME"
ENV_FILE_NAME = "nbclassifier-env.sh"
CLASSPATH_HELPER = Path("bin") / "compute-classpath.sh"


def default_home() -> Path:
    """Installation root.

    NBCLASSIFIER_HOME when set; else the source tree holding the package, if it
    ships the classpath helper; else the current working directory. A
    non-editable install lands in site-packages, so it needs the variable or
    must be launched from the installation root.
    """
    if os.environ.get(HOME_ENV_VAR):
        return Path(os.environ[HOME_ENV_VAR])

    source_root = Path(__file__).resolve().parents[2]
    if (source_root / CLASSPATH_HELPER).exists():
        return source_root
    return Path.cwd()


class LauncherSettings(BaseSettings):
    home: Path = Field(default_factory=default_home, validation_alias=HOME_ENV_VAR)
    java_home: Path | None = Field(default=None, validation_alias="JAVA_HOME")
    spark_home: Path | None = Field(default=None, validation_alias="SPARK_HOME")
    java_opts: str = Field(default="", validation_alias="JAVA_OPTS")

    model_config = SettingsConfigDict(env_file_encoding="utf-8", extra="ignore")

    @property
    def resolved_spark_home(self) -> Path:
        return self.spark_home or self.home / "vendors" / "spark"


def _resolve_path(value: Path | None, home: Path) -> Path | None:
    """Expand `$VAR` references and anchor relative paths at `home`.

    The env file is not run through a shell, so `$NBCLASSIFIER_HOME/...`
    arrives here verbatim.
    """
    if value is None:
        return None
    mapping = {**os.environ, HOME_ENV_VAR: str(home)}
    path = Path(Template(str(value)).safe_substitute(mapping)).expanduser()
    return path if path.is_absolute() else home / path


def load_settings(home: Path | None = None) -> LauncherSettings:
    """Load settings from the environment and `<home>/conf/nbclassifier-env.sh`.

    Real environment variables take precedence over the env file.
    """
    home = home or default_home()
    env_file = home / "conf" / ENV_FILE_NAME
    settings = LauncherSettings(_env_file=env_file if env_file.exists() else None)
    return settings.model_copy(update={
        "home": home,
        "java_home": _resolve_path(settings.java_home, home),
        "spark_home": _resolve_path(settings.spark_home, home),
    })
