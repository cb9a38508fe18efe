"""
Image gallery service.

This package provides a FastAPI application over a gallery controller whose
images live either in a remote Davinci DB collection or, when no remote
application id is configured, in a local key-value store.
"""
