"""Queue-driven order pipeline.

Orders enter through an HTTP front door, are priced and stored, then flow
through durable broker queues: orders -> notifications -> results.
"""

__version__ = "0.1.0"
