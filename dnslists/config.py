"""Configuration management for dnslists."""

import logging
import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

from .lists.enums import ListKind

logger = logging.getLogger(__name__)

DEFAULT_LIST_DIR = Path("/etc/pihole")
DEFAULT_FTL_SOCKET = Path("/run/pihole/FTL.sock")

# Default file names inside the list directory
LIST_FILE_NAMES: dict[ListKind, str] = {
    ListKind.ALLOW: "whitelist.txt",
    ListKind.DENY: "blacklist.txt",
    ListKind.REGEX: "regex.list",
}


@dataclass
class Config:
    """Application configuration loaded from environment."""

    # List files
    list_dir: Path = field(default_factory=lambda: DEFAULT_LIST_DIR)
    whitelist_path: Path | None = None
    blacklist_path: Path | None = None
    regex_path: Path | None = None
    config_dir: Path = field(default_factory=lambda: Path("./config"))

    # Entry matching (domain lists only)
    fold_case: bool = False
    strip_trailing_dot: bool = False

    # Daemon control
    ftl_socket_path: Path = field(default_factory=lambda: DEFAULT_FTL_SOCKET)
    ftl_host: str = ""  # TCP instead of the Unix socket when set
    ftl_port: int = 4711
    ftl_timeout: float = 5.0
    gravity_command: list[str] = field(default_factory=list)

    # HTTP API
    api_host: str = "127.0.0.1"
    api_port: int = 8080
    api_admin_user: str = "admin"
    api_admin_password: str = ""

    def __post_init__(self):
        """Resolve list paths relative to the list directory."""
        self.list_dir = Path(self.list_dir)
        self.config_dir = Path(self.config_dir)
        self.ftl_socket_path = Path(self.ftl_socket_path)
        self.whitelist_path = Path(self.whitelist_path or self.list_dir / LIST_FILE_NAMES[ListKind.ALLOW])
        self.blacklist_path = Path(self.blacklist_path or self.list_dir / LIST_FILE_NAMES[ListKind.DENY])
        self.regex_path = Path(self.regex_path or self.list_dir / LIST_FILE_NAMES[ListKind.REGEX])

    def list_paths(self) -> dict[ListKind, Path]:
        """Map each list kind to its backing file."""
        return {
            ListKind.ALLOW: self.whitelist_path,
            ListKind.DENY: self.blacklist_path,
            ListKind.REGEX: self.regex_path,
        }


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _load_list_settings(config_dir: Path) -> dict:
    """Load path/matching overrides from config/lists.yaml (optional)."""
    path = Path(config_dir or ".") / "lists.yaml"
    if not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except Exception as exc:
        logger.warning("Failed to parse lists.yaml: %s", exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring lists.yaml: expected a mapping at top level")
        return {}

    paths_cfg = data.get("paths") or {}
    matching_cfg = data.get("matching") or {}
    daemon_cfg = data.get("daemon") or {}

    settings: dict[str, object] = {}
    for key, attr in (
        ("list_dir", "list_dir"),
        ("whitelist", "whitelist_path"),
        ("blacklist", "blacklist_path"),
        ("regex", "regex_path"),
    ):
        value = paths_cfg.get(key) if isinstance(paths_cfg, dict) else None
        if value:
            settings[attr] = Path(str(value))
    if isinstance(matching_cfg, dict):
        for key in ("fold_case", "strip_trailing_dot"):
            if key in matching_cfg:
                settings[key] = bool(matching_cfg[key])
    if isinstance(daemon_cfg, dict):
        if daemon_cfg.get("socket"):
            settings["ftl_socket_path"] = Path(str(daemon_cfg["socket"]))
        if daemon_cfg.get("gravity_command"):
            command = daemon_cfg["gravity_command"]
            settings["gravity_command"] = (
                [str(part) for part in command] if isinstance(command, list) else shlex.split(str(command))
            )
    return settings


def load_config(env_file: str | Path | None = None) -> Config:
    """Load configuration from environment variables (and config/lists.yaml)."""
    load_dotenv(env_file)

    config_dir = Path(os.getenv("CONFIG_DIR", "./config"))
    yaml_settings = _load_list_settings(config_dir)

    def _path(name: str, attr: str) -> Path | None:
        raw = os.getenv(name, "").strip()
        if raw:
            return Path(raw)
        return yaml_settings.get(attr)  # type: ignore[return-value]

    gravity_raw = os.getenv("GRAVITY_COMMAND")
    gravity_command = (
        shlex.split(gravity_raw) if gravity_raw is not None else yaml_settings.get("gravity_command", [])
    )

    return Config(
        list_dir=_path("LIST_DIR", "list_dir") or DEFAULT_LIST_DIR,
        whitelist_path=_path("WHITELIST_FILE", "whitelist_path"),
        blacklist_path=_path("BLACKLIST_FILE", "blacklist_path"),
        regex_path=_path("REGEX_FILE", "regex_path"),
        config_dir=config_dir,
        fold_case=_env_bool("MATCH_FOLD_CASE", bool(yaml_settings.get("fold_case", False))),
        strip_trailing_dot=_env_bool(
            "MATCH_STRIP_TRAILING_DOT", bool(yaml_settings.get("strip_trailing_dot", False))
        ),
        ftl_socket_path=_path("FTL_SOCKET", "ftl_socket_path") or DEFAULT_FTL_SOCKET,
        ftl_host=os.getenv("FTL_HOST", ""),
        ftl_port=int(os.getenv("FTL_PORT", "4711")),
        ftl_timeout=float(os.getenv("FTL_TIMEOUT", "5")),
        gravity_command=list(gravity_command),
        api_host=os.getenv("API_HOST", "127.0.0.1"),
        api_port=int(os.getenv("API_PORT", "8080")),
        api_admin_user=os.getenv("API_ADMIN_USER", "admin"),
        api_admin_password=os.getenv("API_ADMIN_PASSWORD", ""),
    )


def validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of error messages."""
    errors: list[str] = []
    if config.ftl_timeout <= 0:
        errors.append("FTL_TIMEOUT must be positive")
    if not (1 <= int(config.ftl_port) <= 65535):
        errors.append("FTL_PORT must be between 1 and 65535")
    paths = [path.resolve() for path in config.list_paths().values()]
    if len(set(paths)) != len(paths):
        errors.append("WHITELIST_FILE, BLACKLIST_FILE and REGEX_FILE must be distinct")

    if not (config.api_admin_password or "").strip():
        # The API refuses admin requests without a password; CLI use still works.
        logger.info("No API_ADMIN_PASSWORD configured; HTTP admin API will reject requests")

    return errors
