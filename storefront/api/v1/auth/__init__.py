"""Authentication API"""
