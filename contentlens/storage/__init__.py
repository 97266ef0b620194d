"""Storage - session and durable score caches, settings persistence"""
