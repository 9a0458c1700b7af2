"""Platform adapters feeding invocations into the dispatchers."""
