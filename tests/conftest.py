import os

# Must be set before any sharebox module builds its settings or engine
os.environ.setdefault("SHAREBOX_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SHAREBOX_SESSION_COOKIE_SECURE", "false")
os.environ.setdefault("SHAREBOX_SECRET_KEY", "test-secret")

pytest_plugins = [
    "tests.fixtures.db_fixtures",
    "tests.fixtures.api_fixtures",
]
