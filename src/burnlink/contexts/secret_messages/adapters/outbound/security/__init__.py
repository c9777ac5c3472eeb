from .aes_gcm_secret_cipher import AesGcmSecretCipher

__all__ = [
    "AesGcmSecretCipher",
]
