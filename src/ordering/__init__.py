"""Ordering bounded context — orders, pricing and the order lifecycle."""
