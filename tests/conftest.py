"""Root conftest — shared test configuration."""

import os

# Keep tests off the real config file and database
os.environ.pop("BESTSUB_CONFIG_FILE", None)
os.environ.setdefault(
    "BESTSUB_JWT__SECRET", "test-jwt-secret-with-enough-length-for-hs256",
)
os.environ.setdefault("BESTSUB_DATABASE__URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BESTSUB_STATIC_DIR", "tests/.no-static")
