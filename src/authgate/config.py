from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str
    port: int
    debug: bool
    cors_origins: list[str] = []
    home_path: str = "/"  # Route guard redirect destination
    callback_url: str = "/test"  # Post-auth redirect target passed to the provider by auth actions
    protected_paths: list[str] = ["/test"]  # Path patterns gated by the route guard
    session_cookie_name: str = "session"
    session_expires_in: int = 7 * 24 * 60 * 60  # Session lifetime in seconds
    cookie_secure: bool = False  # Adds the __Secure- prefix and Secure flag to the session cookie
    min_password_length: int = 8
    max_password_length: int = 72  # In bytes, bcrypt cannot hash longer input

    model_config = {
        "env_file": [".env"],
        "env_prefix": "AUTHGATE_",
        "extra": "ignore",
        "frozen": True,
    }
