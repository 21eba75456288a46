"""Context aggregation, risk classification and domain records."""
