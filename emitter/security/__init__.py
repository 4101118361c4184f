"""Channels, identifiers, access keys and hashing."""