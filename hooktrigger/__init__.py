"""Trigger jobs from inbound webhooks."""
