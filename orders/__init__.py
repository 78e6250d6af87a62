"""Orders API: an order record store with batch upsert over HTTP."""
