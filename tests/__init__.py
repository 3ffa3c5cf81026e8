import os

# Test runs must not try to seed a real database when app.main is imported.
os.environ.setdefault("SEED_ON_STARTUP", "false")
os.environ.setdefault("APP_ENV", "dev")
