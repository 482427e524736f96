"""Endpoint groups mounted by :func:`closurewatch.api.app.create_app`."""
