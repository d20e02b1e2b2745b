"""Root conftest — shared test configuration."""

import os

# Ensure tests don't accidentally use real credentials or services
os.environ.setdefault("OPENROUTER_API_KEY", "sk-or-test-fake-key")
os.environ.setdefault("SUPABASE_URL", "http://supabase.test")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-test-key")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
