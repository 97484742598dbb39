"""
Farecast - price baselines, anomaly scoring and deal packaging for travel fares.

The package is organised in clean-architecture layers:
- shared: cross-cutting enums and logging bootstrap
- domain: entities, pure statistical services and storage interfaces
- application: use cases and DTOs
- infrastructure: MongoDB implementations of the storage interfaces
- main: settings and the composition root
"""

__version__ = "0.1.0"
