"""Club Portal package.

This package is organized by feature modules (members, events, attendance, ...)
with a thin Flask controller layer and service/repository layers.
"""
