"""Team Leave Manager package.

This package is organized by feature modules (members, departments, leaves, ...)
with a thin Flask controller layer and service/repository layers underneath.
The sync module decides per session whether data lives in the remote MySQL
database or in local key-value storage.
"""
