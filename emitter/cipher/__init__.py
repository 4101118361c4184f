"""Ciphers that encrypt and decrypt emitter access keys, and their base64 decoder."""