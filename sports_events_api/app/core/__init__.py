"""Configuration, logging, persistence, security and the action layer."""
