"""Command line entry points (validate-schema, lint-tests, new-plugin, ...)."""

from dotenv import load_dotenv

# Load environment variables FIRST (before importing project modules)
load_dotenv('.env')
