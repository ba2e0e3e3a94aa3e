"""Core application services: configuration, database, errors, security, sessions"""
