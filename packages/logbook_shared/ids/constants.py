"""Postgres domain name used for ULID storage in every service schema."""

ULID_DOMAIN_NAME = "ulid_bin"
