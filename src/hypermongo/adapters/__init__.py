"""Data adapter layer — hyper data-port implementations.

Built-in adapters:
  - mongodb: MongoDB, over either the native driver or the Atlas Data API

Implement ``DataAdapter`` to connect another document store.
"""
