"""
Profile configuration.

Connection profiles live in a YAML file, by default ~/.parashift/pp.yaml:

    profiles:
      - name: production
        api_token: "..."
        domain: api.parashift.io
        tenant_id: "1234"
        default: true

Environment variables:
- PP_CONFIG: alternative path of the profiles file
- PP_PROFILE: profile to use when none is given on the command line

The file is read once per invocation and never written back, except by
create_default_config().
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PP_CONFIG"
PROFILE_ENV_VAR = "PP_PROFILE"
CONFIG_RELATIVE_PATH = Path(".parashift") / "pp.yaml"

DEFAULT_PROFILE_NAME = "default"
DEFAULT_API_TOKEN = "secret"
DEFAULT_DOMAIN = "api.parashift.io"


class ConfigError(Exception):
    """Profiles could not be loaded or resolved."""

    pass


class ProfileNotFoundError(ConfigError):
    """No profile with the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'No profile with name "{name}"')


class NoDefaultProfileError(ConfigError):
    """No profile is marked as default."""

    def __init__(self) -> None:
        super().__init__("No default profile defined.")


@dataclass(frozen=True)
class Profile:
    """Named connection credentials."""

    name: str = DEFAULT_PROFILE_NAME
    api_token: str = field(default=DEFAULT_API_TOKEN, repr=False)
    domain: str = DEFAULT_DOMAIN
    tenant_id: str | None = None
    default: bool = False

    @property
    def base_url(self) -> str:
        return f"https://{self.domain}"

    @classmethod
    def from_dict(cls, data: dict) -> "Profile":
        """Build a profile, falling back to defaults for missing keys."""
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid profile entry: expected a mapping, got {type(data).__name__}")

        tenant_id = data.get("tenant_id")
        default = data.get("default", False)
        if not isinstance(default, bool):
            raise ConfigError(f"Invalid profile entry: 'default' must be true or false, got {default!r}")

        return cls(
            name=_string(data, "name", DEFAULT_PROFILE_NAME),
            api_token=_string(data, "api_token", DEFAULT_API_TOKEN),
            domain=_string(data, "domain", DEFAULT_DOMAIN),
            tenant_id=str(tenant_id) if tenant_id is not None else None,
            default=default,
        )


def _string(data: dict, key: str, fallback: str) -> str:
    value = data.get(key)
    if value is None:
        return fallback
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ConfigError(f"Invalid profile entry: '{key}' must be a string, got {value!r}")
    return str(value)


@dataclass(frozen=True)
class ProfileSet:
    """Ordered profiles as they appear in the config file."""

    profiles: tuple[Profile, ...] = ()

    @classmethod
    def from_dict(cls, data: object) -> "ProfileSet":
        if not isinstance(data, dict) or "profiles" not in data:
            raise ConfigError("Invalid config file: missing 'profiles' list.")
        entries = data["profiles"]
        if not isinstance(entries, list):
            raise ConfigError("Invalid config file: 'profiles' must be a list.")
        return cls(profiles=tuple(Profile.from_dict(entry) for entry in entries))

    def find(self, name: str) -> Profile:
        """First profile with exactly this name."""
        for profile in self.profiles:
            if profile.name == name:
                return profile
        raise ProfileNotFoundError(name)

    def default(self) -> Profile:
        """First profile marked as default; later duplicates are ignored."""
        for profile in self.profiles:
            if profile.default:
                return profile
        raise NoDefaultProfileError()


def default_config_path() -> Path:
    """Location of the profiles file (PP_CONFIG overrides the home path)."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    try:
        home = Path.home()
    except RuntimeError as e:
        raise ConfigError(f"Unable to determine home directory: {e}") from e
    return home / CONFIG_RELATIVE_PATH


def load_config(config_path: Path | None = None) -> ProfileSet:
    """
    Load the profiles file.

    Args:
        config_path: File to read (default: default_config_path())

    Returns:
        ProfileSet in file order

    Raises:
        ConfigError: File unreadable, not YAML, or not shaped like a profile list
    """
    path = config_path or default_config_path()
    logger.debug(f"Loading profiles from {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Unable to read config file {path}: {e.strerror or e}") from e
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigError(f"Unable to parse config file {path}: {e}") from e

    return ProfileSet.from_dict(data)


def load_profile(name: str, config_path: Path | None = None) -> Profile:
    """Profile with the given name (exact, case-sensitive)."""
    return load_config(config_path).find(name)


def get_default_profile(config_path: Path | None = None) -> Profile:
    """First profile marked default."""
    return load_config(config_path).default()


def resolve_profile(name: str | None = None, config_path: Path | None = None) -> Profile:
    """Explicit name, else PP_PROFILE, else the default profile."""
    if name is None:
        name = os.environ.get(PROFILE_ENV_VAR) or None
    if name is not None:
        return load_profile(name, config_path)
    return get_default_profile(config_path)


def list_profiles(config_path: Path | None = None) -> list[str]:
    """One '<name> <domain> <api_token>' line per profile, in file order."""
    return [
        f"{profile.name} {profile.domain} {profile.api_token}"
        for profile in load_config(config_path).profiles
    ]


DEFAULT_CONFIG_TEMPLATE = f"""# Parashift CLI profiles
#
# Select a profile with `pp --profile NAME ...` or the {PROFILE_ENV_VAR} environment
# variable. Without either, the first profile with `default: true` is used.

profiles:
  - name: "{DEFAULT_PROFILE_NAME}"
    api_token: "YOUR_API_TOKEN"
    domain: "{DEFAULT_DOMAIN}"
    tenant_id: null          # Optional tenant the token belongs to
    default: true
"""


def create_default_config(config_path: Path, force: bool = False) -> None:
    """Write a template profiles file."""
    if config_path.exists() and not force:
        raise ConfigError(f"Config file {config_path} already exists (use --force to overwrite).")

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(DEFAULT_CONFIG_TEMPLATE)
    except OSError as e:
        raise ConfigError(f"Unable to write config file {config_path}: {e.strerror or e}") from e
