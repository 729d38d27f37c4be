"""
errors.py
Error taxonomy shared by the store, the service layer and the HTTP API.
"""

from __future__ import annotations


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class Unauthorized(AppError):
    status_code = 401


class NotFound(AppError):
    status_code = 404


class StoreError(AppError):
    status_code = 500
