"""Core configuration, database and language handling"""
