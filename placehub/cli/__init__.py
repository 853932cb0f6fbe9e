"""Command line interface for PlaceHub"""
