"""
Application package for the hybrid RSA/AES encryption demo.

This package encapsulates the FastAPI application and its
cryptographic helpers.  ``uvicorn hybrid_api.main:create_app --factory``
resolves once the package is installed.
"""
