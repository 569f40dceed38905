"""Customers bounded context — registered clients."""
