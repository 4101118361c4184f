"""Request and response messages of the key-ban service."""