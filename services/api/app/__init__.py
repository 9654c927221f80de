"""Travel Deal Validator API."""
