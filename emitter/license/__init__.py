"""Emitter licences in versions 1 to 3, and their encoding."""