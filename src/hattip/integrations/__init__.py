"""Transport adapters implementing the hattip.client.Client protocol on top
of common HTTP libraries.

Each adapter lives in its own module and is only imported on demand.
Importing an adapter registers the exception types of its library with
hattip.status.
"""
