"""Core infrastructure subpackage.

This package contains the HelmSecrets facade class.
"""

from helm_secrets.core.helm_secrets import HelmSecrets

__all__ = [
    "HelmSecrets",
]
