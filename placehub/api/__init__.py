"""API layer - Routes, dependencies, and exception handlers"""
