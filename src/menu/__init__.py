"""Menu bounded context — products and the catalog used for pricing."""
