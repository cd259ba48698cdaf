"""Domain records, ports and use cases, independent of the HTTP transport."""
