"""Store client layer — Connections to a MongoDB deployment.

Built-in clients:
  - native: MongoDB wire protocol via ``motor`` (``mongodb://``, ``mongodb+srv://``)
  - atlas: MongoDB Atlas Data API over HTTPS (``https://``)

Implement ``StoreClient`` to reach MongoDB some other way.
"""
