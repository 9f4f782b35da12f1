"""Infrastructure layer — operational concerns for the beat-cut pipeline.

Modules:
    metrics     Prometheus metrics registry.
"""
