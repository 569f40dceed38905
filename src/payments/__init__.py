"""Payments bounded context — payment requests, gateways and webhook reconciliation."""
