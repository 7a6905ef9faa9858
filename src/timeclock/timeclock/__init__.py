"""Time clock package.

This package is organized by feature modules (punches, tokens, reports,
justifications, ...) with a thin Flask controller layer and service/repository
layers underneath.
"""
