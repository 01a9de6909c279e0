"""Secrets management subpackage.

This package contains modules for classifying secret files, invoking
sops, and the encrypt/decrypt/view/edit/clean operations built on them.
"""

from helm_secrets.secrets.classify import (
    decrypted_path,
    encrypted_path,
    is_decrypted_name,
    is_encrypted,
    is_fresh,
    is_secret_file,
)
from helm_secrets.secrets.crypt import (
    clean_decrypted,
    decrypt_secret,
    edit_secret,
    encrypt_secret,
    view_secret,
)
from helm_secrets.secrets.sops import Sops

__all__ = [
    # classify
    "is_encrypted",
    "is_secret_file",
    "is_decrypted_name",
    "is_fresh",
    "decrypted_path",
    "encrypted_path",
    # crypt
    "decrypt_secret",
    "encrypt_secret",
    "view_secret",
    "edit_secret",
    "clean_decrypted",
    # sops
    "Sops",
]
