"""Application layer: DTOs and multi-step use cases.

Depends only on domain and DTO definitions; repositories are passed in.
"""
