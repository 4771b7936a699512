"""Application layer: DTOs, repository ports, services and use cases.

Depends on domain only; infrastructure implements the ports.
"""
