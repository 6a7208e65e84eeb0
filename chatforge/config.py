"""Configuration loaded from environment (.env) and defaults."""

from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Locate the project root .env file regardless of CWD
_THIS_DIR = Path(__file__).resolve().parent          # chatforge/
_PROJECT_ROOT = _THIS_DIR.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/128.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote chat application
    chatforge_target_url: str = "https://chat.z.ai/"
    chatforge_login_url: str = "https://chat.z.ai/login"
    chatforge_cookie_domain: str = ".chat.z.ai"

    # Session token injected into localStorage + cookies. Unset = anonymous.
    chatforge_auth_token: SecretStr | None = None

    # Browser
    chatforge_headless: bool = True
    chatforge_browser_executable: str | None = None
    chatforge_user_agent: str = DEFAULT_USER_AGENT

    # Phase bounds and delays (milliseconds)
    chatforge_login_timeout_ms: int = 30_000
    chatforge_navigation_timeout_ms: int = 60_000
    chatforge_input_timeout_ms: int = 120_000
    chatforge_input_settle_ms: int = 300
    chatforge_initial_delay_ms: int = 5_000
    chatforge_skip_timeout_ms: int = 20_000
    chatforge_skip_poll_ms: int = 500
    chatforge_completion_timeout_ms: int = 900_000
    chatforge_completion_poll_ms: int = 3_000
    chatforge_settle_delay_ms: int = 3_000

    # Extracted documents shorter than this are treated as failures
    chatforge_min_artifact_chars: int = 100

    # Thinking mode at startup: "on" (let the model think) | "off" (click Skip)
    chatforge_thinking_mode: str = "on"

    # Data directory for generated files and debug dumps
    chatforge_data_dir: str = "./data"

    # Write page HTML + screenshot for failed jobs
    chatforge_debug_dumps: bool = False

    # CORS origins (comma-separated)
    cors_origins: str = "*"

    # Server port
    port: int = 4000

    @property
    def data_dir(self) -> Path:
        """Get data directory as Path.

        Relative paths are resolved against the project root (not CWD).
        """
        p = Path(self.chatforge_data_dir)
        if not p.is_absolute():
            return (_PROJECT_ROOT / p).resolve()
        return p.resolve()

    @property
    def output_dir(self) -> Path:
        """Directory for artifacts saved by the CLI."""
        return self.data_dir / "output"

    @property
    def debug_dir(self) -> Path:
        return self.data_dir / "debug"

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def auth_credential(self) -> str | None:
        if self.chatforge_auth_token is None:
            return None
        return self.chatforge_auth_token.get_secret_value() or None

    def ensure_dirs(self) -> None:
        """Ensure all data directories exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.debug_dir.mkdir(parents=True, exist_ok=True)


def get_settings() -> Settings:
    settings = Settings()
    settings.ensure_dirs()
    return settings
