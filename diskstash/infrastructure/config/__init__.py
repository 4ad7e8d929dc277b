"""Configuration loading for diskstash (YAML file, .env file, environment)."""
