import os

# Keep test runs quiet and independent of a developer's .env
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("UPDATE_AUDIENCE", "all")
