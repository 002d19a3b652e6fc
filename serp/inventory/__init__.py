"""Inventory service: item models, item store and GraphQL and event handlers."""